"""Markdown design report for the report phase."""

from decimal import Decimal

from state import ProjectData

DEFAULT_TITLE = "Reporte de Diseño Mecatrónico"
SUBTITLE = "Documento de Integración y Selección de Componentes"
UNDEFINED_REQUIREMENT = "No definido"
NO_COMPONENTS = "No se han seleccionado componentes."
MODEL_INCLUDED = "Análisis IA incluido en el reporte final."
MODEL_MISSING = "No se ha generado modelo matemático."
CODE_MISSING = "No se ha generado código de control."


def format_cost(amount: Decimal) -> str:
    """Money as shown in the UI: "$25.00"."""
    return f"${amount:.2f}"


def build_report(data: ProjectData) -> str:
    """Render the project as a Markdown document."""
    lines = [
        f"# {data.project_name or DEFAULT_TITLE}",
        "",
        f"_{SUBTITLE}_",
        "",
        "## 1. Análisis de Requerimientos",
        "",
    ]
    if data.requirements:
        for req in data.requirements:
            lines.append(f"- **[{req.type.value}]** {req.description or UNDEFINED_REQUIREMENT}")
    else:
        lines.append(UNDEFINED_REQUIREMENT)

    lines += ["", "## 2. Lista de Componentes Seleccionados", ""]
    if data.selected_components:
        lines += ["| Componente | Categoría | Costo |", "|---|---|---|"]
        for comp in data.selected_components:
            lines.append(f"| {comp.name} | {comp.category.value} | {format_cost(comp.cost)} |")
        lines += ["", f"**Presupuesto Estimado:** {format_cost(data.total_cost())}"]
    else:
        lines.append(NO_COMPONENTS)

    lines += ["", "## 3. Modelo Matemático", ""]
    if data.math_model:
        lines += [MODEL_INCLUDED, "", data.math_model]
    else:
        lines.append(MODEL_MISSING)

    lines += ["", "## 4. Lógica de Control", ""]
    if data.arduino_code:
        lines += ["```cpp", data.arduino_code, "```"]
    else:
        lines.append(CODE_MISSING)

    return "\n".join(lines) + "\n"
