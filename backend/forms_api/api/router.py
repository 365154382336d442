from fastapi import APIRouter

from forms_api.api.endpoints import components, definition, forms, lists, options, pages, sections

DRAFT = "/forms/{form_id}/definition/draft"

api_router = APIRouter()

api_router.include_router(forms.router, prefix="/forms", tags=["forms"])
api_router.include_router(definition.router, prefix="/forms/{form_id}/definition", tags=["definition"])
api_router.include_router(pages.router, prefix=f"{DRAFT}/pages", tags=["pages"])
api_router.include_router(components.router, prefix=f"{DRAFT}/pages/{{page_id}}/components", tags=["components"])
api_router.include_router(lists.router, prefix=f"{DRAFT}/lists", tags=["lists"])
api_router.include_router(sections.router, prefix=f"{DRAFT}/sections", tags=["sections"])
api_router.include_router(options.router, prefix=f"{DRAFT}/options", tags=["options"])
