"""
LLM prompt templates and canned tutor questions.

The templates are filled by LLMAdvisoryGateway; the questions are the
one-click prompts offered in the UI.
"""

PROMPT_FEEDBACK = """\
You are an expert Mechatronics Engineering Professor. Provide constructive feedback on the following project context: {snapshot}

User prompt: {prompt}

Focus on requirements analysis, physics-based modeling (derivatives/integrals), and Arduino programming."""

PROMPT_CONTROL_CODE = """\
Write a basic Arduino code for a mechatronics project using these components: {components}.
Logic: {logic}.
Include comments explaining the control logic."""

PROMPT_MODEL_EXPLANATION = """\
Explain the mathematical model for {concept} in mechatronics.
Use LaTeX notation for integrals and derivatives.
Explain how to apply it to a real system."""

NO_COMPONENTS_PLACEHOLDER = "(no components selected yet)"

# One-click questions shown in the UI
QUESTION_VALIDATE_REQUIREMENTS = (
    "Evalúa mis requerimientos actuales. ¿Son específicos, medibles y realistas "
    "para un sistema mecatrónico?"
)
QUESTION_VALIDATE_COMPONENTS = "¿Esta combinación de componentes es compatible para mi proyecto?"

QUICK_QUESTIONS = {
    "¿Integral de volumen?": "¿Cómo aplico una integral para calcular el volumen en un tanque?",
    "¿Seguridad?": "Dime qué requisitos de seguridad faltan en mi diseño.",
}
