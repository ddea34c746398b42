import streamlit as st
import pandas as pd

from area_converter import (
    SETTINGS_PANEL,
    Converter,
    RatioConfig,
    format_number,
)
from ratio_store import MemoryRatioStore


class AreaConverterCalculator:
    """
    Hectare / Bigha / Biswa converter.

    Editing any of the three fields recomputes the other two. The ⚙️ button
    opens a settings panel for the two conversion ratios; touching any
    other widget while it is open closes it.
    """

    QUANTITY_KEYS = {
        "hectare": "area_hectare",
        "bigha": "area_bigha",
        "biswa": "area_biswa",
    }

    RATIO_KEYS = {
        "hectare_to_bigha": "area_hectare_to_bigha",
        "bigha_to_biswa": "area_bigha_to_biswa",
    }

    UNITS = ["Hectare", "Bigha", "Biswa"]

    @staticmethod
    def equivalents_table(config: RatioConfig) -> pd.DataFrame:
        """One of each unit expressed in all three, under `config`."""
        scratch = Converter(MemoryRatioStore(), ratios=config)

        rows = []
        for unit in AreaConverterCalculator.UNITS:
            getattr(scratch, f"edit_{unit.lower()}")("1")
            rows.append(
                {
                    "Unit": f"1 {unit}",
                    "Hectare": scratch.hectare,
                    "Bigha": scratch.bigha,
                    "Biswa": scratch.biswa,
                }
            )
        return pd.DataFrame(rows)

    # ----- session sync -----

    @classmethod
    def _sync_quantities(cls, converter: Converter):
        for attr, key in cls.QUANTITY_KEYS.items():
            st.session_state[key] = getattr(converter, attr)

    @classmethod
    def _sync_ratios(cls, converter: Converter):
        for attr, key in cls.RATIO_KEYS.items():
            st.session_state[key] = format_number(getattr(converter, attr))

    # ----- callbacks -----

    @classmethod
    def _on_quantity_change(cls, converter: Converter, unit: str):
        converter.events.pointer_down(unit)
        text = st.session_state[cls.QUANTITY_KEYS[unit]]
        getattr(converter, f"edit_{unit}")(text)
        cls._sync_quantities(converter)

    @classmethod
    def _on_ratio_change(cls, converter: Converter, ratio: str):
        converter.events.pointer_down(SETTINGS_PANEL)
        text = st.session_state[cls.RATIO_KEYS[ratio]]
        getattr(converter, f"set_{ratio}")(text)
        cls._sync_ratios(converter)

    @classmethod
    def _on_toggle(cls, converter: Converter):
        converter.toggle_settings()
        if converter.settings_visible:
            cls._sync_ratios(converter)

    @classmethod
    def _on_save(cls, converter: Converter):
        converter.save_settings()

    @classmethod
    def _on_reset(cls, converter: Converter):
        converter.reset_settings()
        cls._sync_quantities(converter)
        cls._sync_ratios(converter)

    # ----- layout -----

    @classmethod
    def render(cls, converter: Converter):
        for attr, key in cls.QUANTITY_KEYS.items():
            st.session_state.setdefault(key, getattr(converter, attr))

        col_title, col_toggle = st.columns([6, 1])

        with col_title:
            st.subheader("Area Conversion Calculator")

        with col_toggle:
            st.button(
                "⚙️",
                key="area_settings_toggle",
                help="Settings",
                on_click=cls._on_toggle,
                args=(converter,),
            )

        if converter.settings_visible:
            cls._render_settings(converter)

        for unit in cls.UNITS:
            attr = unit.lower()
            st.text_input(
                unit,
                key=cls.QUANTITY_KEYS[attr],
                placeholder=f"Enter area in {attr}",
                on_change=cls._on_quantity_change,
                args=(converter, attr),
            )

        with st.expander("Show details", expanded=False):
            st.write(
                f"1 Hectare = `{format_number(converter.hectare_to_bigha)}` Bigha, "
                f"1 Bigha = `{format_number(converter.bigha_to_biswa)}` Biswa"
            )
            st.dataframe(cls.equivalents_table(converter.ratios), hide_index=True)

    @classmethod
    def _render_settings(cls, converter: Converter):
        for attr, key in cls.RATIO_KEYS.items():
            st.session_state.setdefault(key, format_number(getattr(converter, attr)))

        with st.container(border=True):
            st.markdown("#### Settings")

            st.text_input(
                "1 Hectare = ? Bigha",
                key=cls.RATIO_KEYS["hectare_to_bigha"],
                on_change=cls._on_ratio_change,
                args=(converter, "hectare_to_bigha"),
            )
            st.text_input(
                "1 Bigha = ? Biswa",
                key=cls.RATIO_KEYS["bigha_to_biswa"],
                on_change=cls._on_ratio_change,
                args=(converter, "bigha_to_biswa"),
            )

            col_save, col_reset, _ = st.columns([1, 1, 3])
            with col_save:
                st.button(
                    "Save",
                    key="area_settings_save",
                    type="primary",
                    on_click=cls._on_save,
                    args=(converter,),
                )
            with col_reset:
                st.button(
                    "Reset",
                    key="area_settings_reset",
                    on_click=cls._on_reset,
                    args=(converter,),
                )
