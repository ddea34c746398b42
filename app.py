import logging

import streamlit as st

from area_converter import Converter
from calculators import AreaConverterCalculator
from ratio_store import JsonFileRatioStore
from settings import load_settings


logger = logging.getLogger(__name__)


# -----------------------
# Helpers
# -----------------------

def configure_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


def get_converter() -> Converter:
    """One converter per browser session, loaded from the ratio file once."""
    if "area_converter" not in st.session_state:
        settings = load_settings()
        converter = Converter(JsonFileRatioStore(settings.store_path))
        converter.initialize()
        logger.info("Converter ready (store: %s)", settings.store_path)
        st.session_state["area_converter"] = converter
    return st.session_state["area_converter"]


# -----------------------
# Entry point
# -----------------------

def main():
    st.set_page_config(page_title="Area Calculator", layout="centered")

    configure_logging(load_settings().log_level)

    AreaConverterCalculator.render(get_converter())


if __name__ == "__main__":
    main()
