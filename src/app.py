"""
MecaMaster Lab: Streamlit single-page UI.

Run with:
    streamlit run src/app.py --server.port 8502

Each browser session owns one ProjectStore and one Tutor, kept in
st.session_state. Rendering reads the store and the tutor; widgets only
hold transient input buffers and write back through store operations.
"""

import streamlit as st

from advisory import LLMAdvisoryGateway
from catalog import COMPONENT_CATALOG
from config import load_config
from llm import LLMClient
from logging_utils import get_logger, set_level
from prompts import QUESTION_VALIDATE_COMPONENTS, QUESTION_VALIDATE_REQUIREMENTS, QUICK_QUESTIONS
from report import build_report, format_cost
from state import ProjectPhase, ProjectStore, RequirementType
from tutor import Tutor

logger = get_logger(__name__)

REQUIREMENT_BUTTONS = {
    RequirementType.FUNCTIONAL: "+ Funcional",
    RequirementType.ECONOMIC: "+ Económico",
    RequirementType.SAFETY: "+ Seguridad",
}

LOADING_TEXT = "Analizando el sistema..."


def initialize_session_state():
    if "config" not in st.session_state:
        config = load_config()
        set_level(config.log_level)
        st.session_state.config = config
    if "store" not in st.session_state:
        st.session_state.store = ProjectStore()
    if "tutor" not in st.session_state:
        config = st.session_state.config
        try:
            client = LLMClient(config.llm, log_path=config.llm_log_path)
        except RuntimeError as e:
            logger.error("Tutor unavailable: %s", e)
            st.session_state.tutor = None
            st.session_state.tutor_error = str(e)
        else:
            gateway = LLMAdvisoryGateway(client)
            st.session_state.tutor = Tutor(st.session_state.store, gateway, config.tutor)
            st.session_state.tutor_error = None


# =============================================================================
# Callbacks
# =============================================================================

def _select_phase() -> None:
    st.session_state.store.set_phase(st.session_state.phase_selector)


def _ask_tutor(question: str) -> None:
    tutor = st.session_state.tutor
    if tutor is None or not question.strip():
        return
    with st.spinner(LOADING_TEXT):
        tutor.ask(question)


def _generate_code() -> None:
    tutor = st.session_state.tutor
    if tutor is None:
        return
    with st.spinner(LOADING_TEXT):
        tutor.draft_code()
    # Refresh the editor buffer with the new draft
    st.session_state.arduino_code_input = st.session_state.store.data.arduino_code


def _analyze_model() -> None:
    tutor = st.session_state.tutor
    concept = st.session_state.get("math_input", "")
    if tutor is None or not concept.strip():
        return
    with st.spinner(LOADING_TEXT):
        tutor.explain_model(concept)


def _sync_project_name() -> None:
    st.session_state.store.set_project_name(st.session_state.project_name_input)


def _sync_requirement(requirement_id: str) -> None:
    text = st.session_state[f"req_{requirement_id}"]
    st.session_state.store.update_requirement_description(requirement_id, text)


def _sync_arduino_code() -> None:
    st.session_state.store.set_arduino_code(st.session_state.arduino_code_input)


# =============================================================================
# Phase views
# =============================================================================

def render_requirements(store: ProjectStore, tutor_ready: bool) -> None:
    st.subheader("Identidad del Proyecto")
    st.text_input(
        "Nombre del Proyecto Mecatrónico",
        value=store.data.project_name,
        key="project_name_input",
        on_change=_sync_project_name,
        placeholder="Ej. Brazo Robótico Clasificador, Tanque de Nivel...",
    )

    st.subheader("Análisis de Requerimientos")
    columns = st.columns(len(REQUIREMENT_BUTTONS))
    for column, (req_type, label) in zip(columns, REQUIREMENT_BUTTONS.items()):
        column.button(label, key=f"add_{req_type.value}", on_click=store.add_requirement, args=(req_type,))

    if not store.data.requirements:
        st.info("No hay requerimientos definidos. Haz clic en los botones de arriba para empezar.")

    for req in store.data.requirements:
        with st.container(border=True):
            header, remove = st.columns([5, 1])
            header.markdown(f"**{req.type.value.upper()} REQUIREMENT** · _{req.status.value}_")
            remove.button("✕", key=f"remove_{req.id}", on_click=store.remove_requirement, args=(req.id,))
            st.text_area(
                "Descripción",
                value=req.description,
                key=f"req_{req.id}",
                on_change=_sync_requirement,
                args=(req.id,),
                placeholder=f"Define {req.type.value} requirement...",
                label_visibility="collapsed",
            )

    st.markdown("**Validación de Requerimientos**")
    st.button(
        "Consultar al Tutor IA",
        on_click=_ask_tutor,
        args=(QUESTION_VALIDATE_REQUIREMENTS,),
        disabled=not tutor_ready,
        use_container_width=True,
    )


def render_components(store: ProjectStore, tutor_ready: bool) -> None:
    st.subheader("Selección de Componentes")
    columns = st.columns(2)
    for index, comp in enumerate(COMPONENT_CATALOG):
        selected = store.is_selected(comp.id)
        with columns[index % 2].container(border=True):
            st.image(comp.image, width=80)
            st.markdown(f"**{comp.name}** {'✓' if selected else ''}")
            st.caption(comp.description)
            st.caption(" · ".join(f"{k}: {v}" for k, v in comp.specifications.items()))
            st.markdown(f"**{format_cost(comp.cost)}**")
            st.button(
                "Quitar" if selected else "Agregar",
                key=f"toggle_{comp.id}",
                on_click=store.toggle_component_selection,
                args=(comp.id,),
            )

    budget, validate = st.columns([2, 1])
    budget.metric("Presupuesto Estimado", format_cost(store.total_cost()))
    validate.button(
        "Validar Selección",
        on_click=_ask_tutor,
        args=(QUESTION_VALIDATE_COMPONENTS,),
        disabled=not tutor_ready,
    )


def render_modeling(store: ProjectStore, tutor_ready: bool) -> None:
    st.subheader("Modelación y Física")
    st.write(
        "Ingresa el concepto físico o la ecuación que deseas modelar "
        '(ej: "Dinámica de un motor DC", "Llenado de tanque con integral").'
    )
    st.text_input("Concepto", key="math_input", placeholder="Escribe el concepto aquí...")
    st.button("Analizar", on_click=_analyze_model, disabled=not tutor_ready)

    if store.data.math_model:
        with st.container(border=True):
            st.markdown(store.data.math_model)


def render_programming(store: ProjectStore, tutor_ready: bool) -> None:
    st.subheader("Lógica de Control (Arduino)")
    st.button("Generar Base de Código", on_click=_generate_code, disabled=not tutor_ready)

    if "arduino_code_input" not in st.session_state:
        st.session_state.arduino_code_input = store.data.arduino_code
    st.text_area(
        "sketch_mechamaster.ino",
        key="arduino_code_input",
        on_change=_sync_arduino_code,
        height=400,
        placeholder="// El código generado aparecerá aquí...",
    )
    st.caption(
        "* Recuerda validar siempre el código en un simulador como Tinkercad o Wokwi "
        "antes de implementarlo en hardware real."
    )


def render_report(store: ProjectStore, tutor_ready: bool) -> None:
    report = build_report(store.data)
    with st.container(border=True):
        st.markdown(report)
    st.download_button(
        label="Descargar Reporte (Markdown)",
        data=report,
        file_name="reporte_mecamaster.md",
        mime="text/markdown",
    )


PHASE_VIEWS = {
    ProjectPhase.REQUIREMENTS: render_requirements,
    ProjectPhase.COMPONENTS: render_components,
    ProjectPhase.MODELING: render_modeling,
    ProjectPhase.PROGRAMMING: render_programming,
    ProjectPhase.REPORT: render_report,
}


# =============================================================================
# Tutor sidebar
# =============================================================================

def render_tutor_sidebar(tutor: Tutor | None, error: str | None) -> None:
    with st.sidebar:
        st.header("Tutor de Mecatrónica")
        message_box = st.empty()

        with st.form("tutor_question", clear_on_submit=True):
            question = st.text_input("Escribe tu duda...")
            submitted = st.form_submit_button("Enviar", disabled=tutor is None)
        if submitted:
            _ask_tutor(question)

        for label, quick_question in QUICK_QUESTIONS.items():
            st.button(label, key=f"quick_{label}", on_click=_ask_tutor, args=(quick_question,),
                      disabled=tutor is None)

        if tutor is None:
            message_box.error(f"Tutor IA no disponible: {error}")
        elif tutor.is_loading:
            message_box.info(LOADING_TEXT)
        else:
            message_box.info(tutor.message)


def main():
    st.set_page_config(page_title="MecaMaster Lab", layout="wide")
    initialize_session_state()

    store: ProjectStore = st.session_state.store
    tutor: Tutor | None = st.session_state.tutor

    st.title("MecaMaster Lab")
    st.caption("Plataforma Educativa de Mecatrónica")

    # The selector owns its value through a stable key; the store follows it
    if "phase_selector" not in st.session_state:
        st.session_state.phase_selector = store.phase
    st.radio(
        "Fase",
        list(ProjectPhase),
        key="phase_selector",
        on_change=_select_phase,
        format_func=lambda p: p.label,
        horizontal=True,
        label_visibility="collapsed",
    )

    st.divider()

    PHASE_VIEWS[store.phase](store, tutor is not None)
    render_tutor_sidebar(tutor, st.session_state.get("tutor_error"))

    st.divider()
    st.caption(
        f"PROYECTO: {(store.data.project_name or 'Sin Nombre').upper()} · "
        f"PHASE: {store.phase.value.upper()}"
    )


if __name__ == "__main__":
    main()
