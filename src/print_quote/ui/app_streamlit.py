"""
Streamlit UI for the 3D printing instant quote.

Features:
- Live price calculation from part dimensions, material, infill,
  layer height and quantity
- Cost breakdown with quantity discount
- Resolution trace for every quote
- Project inquiry contact form
"""
import streamlit as st
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from print_quote.engine import PricingEngine, PricingError, LayerHeight, format_currency
from print_quote.config.settings import get_settings
from print_quote.services.contact_service import ProjectType, ContactFormError, submit_inquiry
from print_quote.ui.presenters import breakdown_table, discount_tier_table, material_table


st.set_page_config(
    page_title="Instant Quote",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return PricingEngine()


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    return get_settings()


try:
    engine = get_engine()
    settings = get_settings_cached()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

table = engine.table


# ============================================================================
# SIDEBAR: Printer & Pricing
# ============================================================================
with st.sidebar:
    st.header("🖨️ Stratasys F170")

    with st.container(border=True):
        envelope = settings.max_dimension_mm
        st.markdown(f"**Build envelope:** {envelope} × {envelope} × {envelope} mm")
        st.markdown(f"**Machine rate:** {format_currency(table.machine_hourly_rate, table.currency)}/h")
        st.markdown(f"**Setup fee:** {format_currency(table.setup_fee, table.currency)} per part")

    with st.expander("🧪 Materials"):
        st.dataframe(material_table(table), hide_index=True, use_container_width=True)

    with st.expander("📦 Quantity Discounts"):
        st.dataframe(discount_tier_table(table), hide_index=True, use_container_width=True)


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Instant Quote")
st.caption("Get real-time pricing for your 3D printing project")

tab1, tab2 = st.tabs(["⚡ Instant Quote", "✉️ Contact"])


# ============================================================================
# TAB 1: PRICING CALCULATOR
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.2, 1.8], gap="large")

    with col1:
        st.subheader("Part Configuration")

        with st.container(border=True):
            dims = {}
            for axis in ("Length", "Width", "Height"):
                dims[axis] = st.slider(
                    f"{axis} (mm)",
                    min_value=settings.min_dimension_mm,
                    max_value=settings.max_dimension_mm,
                    value=settings.default_dimension_mm,
                    key=f"dim_{axis.lower()}",
                )

        with st.container(border=True):
            material = st.selectbox(
                "Material",
                options=[m.value for m in table.materials],
                key="material",
            )
            infill = st.slider(
                "Infill Density (%)",
                min_value=settings.min_infill_percent,
                max_value=settings.max_infill_percent,
                value=settings.default_infill_percent,
                key="infill",
            )
            layer_options = [lh.value for lh in table.layer_heights]
            layer_height = st.radio(
                "Layer Height",
                options=layer_options,
                index=layer_options.index("standard") if "standard" in layer_options else 0,
                format_func=lambda v: f"{v.capitalize()} ({table.layer_mm[LayerHeight(v)]} mm)"
                if LayerHeight(v) in table.layer_mm else v.capitalize(),
                horizontal=True,
                key="layer_height",
            )
            quantity = st.number_input(
                "Quantity",
                min_value=settings.min_quantity,
                max_value=settings.max_quantity,
                value=settings.min_quantity,
                step=1,
                key="quantity",
            )

    with col2:
        st.subheader("Cost Breakdown")

        try:
            breakdown = engine.quote(
                length_mm=dims["Length"],
                width_mm=dims["Width"],
                height_mm=dims["Height"],
                material=material,
                infill_percent=infill,
                layer_height=layer_height,
                quantity=int(quantity),
            )
        except PricingError as e:
            st.error(f"**{e.field or 'input'}**: {e.message}")
        else:
            m1, m2, m3 = st.columns(3)
            m1.metric("Total", format_currency(breakdown.total, breakdown.currency))
            m2.metric("Print Time", breakdown.print_time)
            m3.metric(
                "Discount",
                f"{breakdown.discount_percent:g}%",
                delta=f"-{format_currency(breakdown.discount_amount, breakdown.currency)}"
                if breakdown.discount_amount > 0 else None,
            )

            with st.container(border=True):
                st.caption(
                    f"{dims['Length']} × {dims['Width']} × {dims['Height']} mm · "
                    f"{breakdown.volume_cm3:.2f} cm³ · {breakdown.weight_kg:.3f} kg"
                )
                st.dataframe(breakdown_table(breakdown), hide_index=True, use_container_width=True)

            with st.expander("🔍 Calculation Details"):
                for t in breakdown.trace:
                    if t.value:
                        st.caption(f"**{t.step}**: {t.description} = `{t.value}`")
                    else:
                        st.caption(f"**{t.step}**: {t.description}")


# ============================================================================
# TAB 2: CONTACT
# ============================================================================
with tab2:
    st.subheader("Let's Materialize Your Vision")
    st.caption("Get in touch to discuss your project requirements")

    if st.session_state.get("inquiry_sent"):
        st.success(f"Thank you, {st.session_state.inquiry_sent}! We'll get back to you within 24 hours.")
        if st.button("Send another inquiry"):
            st.session_state.inquiry_sent = None
            st.rerun()
    else:
        with st.form("contact_form", border=True):
            c1, c2 = st.columns(2)
            with c1:
                name = st.text_input("Name *")
                phone = st.text_input("Phone")
            with c2:
                email = st.text_input("Email *")
                project_type = st.selectbox(
                    "Project Type *",
                    options=[None] + list(ProjectType),
                    format_func=lambda p: "Select type..." if p is None else p.label,
                )
            message = st.text_area("Project Details *", height=150)
            submitted = st.form_submit_button("Send Message", type="primary")

        if submitted:
            try:
                inquiry = submit_inquiry({
                    "name": name,
                    "email": email,
                    "phone": phone,
                    "project_type": project_type,
                    "message": message,
                })
            except ContactFormError as e:
                for field, error in e.errors.items():
                    st.error(f"**{field.replace('_', ' ').title()}**: {error}")
            else:
                st.session_state.inquiry_sent = inquiry.name
                st.rerun()
