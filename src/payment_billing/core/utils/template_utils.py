from django.template import Context, Template


def render_message(template_str: str, context: dict) -> str:
    """
    Renderiza um template com placeholders `{{ var }}` usando a engine do Django.

    Exemplo:
        render_message("Olá {{ nome }}", {"nome": "Maria"})  ->  "Olá Maria"
    """
    return Template(template_str).render(Context(context))


def format_brl(value) -> str:
    """`49.9` → `R$ 49,90`."""
    if value is None:
        return "R$ 0,00"
    text = f"{float(value):,.2f}"
    return "R$ " + text.replace(",", "X").replace(".", ",").replace("X", ".")
