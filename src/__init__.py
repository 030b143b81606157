"""
MecaMaster Lab: guided mechatronics design projects with an AI tutor.

Key design principles:
1. No global mutable state - each session owns a ProjectStore
2. Explicit dependencies - the Tutor gets its store and gateway injected
3. The advisory service sits behind the narrow AdvisoryGateway interface
4. Only the latest advisory call's result is ever applied

Modules:
- state.py: ProjectStore, ProjectData, ProjectPhase, Requirement
- catalog.py: Component, COMPONENT_CATALOG
- config.py: Immutable AppConfig, LLMConfig, TutorConfig
- llm.py: LLMClient
- advisory.py: AdvisoryGateway, LLMAdvisoryGateway, AdvisoryFailure
- tutor.py: Tutor, AdvisoryKind, AdvisoryOutcome
- report.py: Markdown report
- app.py: Streamlit UI
"""

from state import ProjectStore, ProjectData, ProjectPhase, Requirement, RequirementType, StateUpdate
from catalog import Component, COMPONENT_CATALOG, get_component
from config import AppConfig, load_config
from llm import LLMClient
from advisory import AdvisoryGateway, AdvisoryFailure, LLMAdvisoryGateway
from tutor import Tutor, AdvisoryKind, AdvisoryOutcome
from report import build_report

__all__ = [
    # State
    "ProjectStore",
    "ProjectData",
    "ProjectPhase",
    "Requirement",
    "RequirementType",
    "StateUpdate",
    # Catalog
    "Component",
    "COMPONENT_CATALOG",
    "get_component",
    # Config
    "AppConfig",
    "load_config",
    # LLM
    "LLMClient",
    # Advisory
    "AdvisoryGateway",
    "AdvisoryFailure",
    "LLMAdvisoryGateway",
    # Tutor
    "Tutor",
    "AdvisoryKind",
    "AdvisoryOutcome",
    # Report
    "build_report",
]
