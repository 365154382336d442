from forms_api.models.form import Form
from forms_api.models.form_definition import FormDefinition

__all__ = [
    "Form",
    "FormDefinition",
]
