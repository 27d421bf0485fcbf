"""Endpoints for templates, presets and entry composition."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from nutrition_entry.api.auth import current_owner, require_api_token
from nutrition_entry.api.models import (
    ComposeEntryRequest,
    CreateTemplateRequest,
    TemplateSourcePayload,
)
from nutrition_entry.domain.nutrition import check_macro_consistency
from nutrition_entry.services.entries import QUICK_PRESETS

if TYPE_CHECKING:
    from nutrition_entry.containers import AppContainer
    from nutrition_entry.domain.entries import CompositionSource

router = APIRouter(tags=["entries"], dependencies=[Depends(require_api_token)])


@router.get("/templates")
async def list_templates(
    request: Request, owner_id: UUID = Depends(current_owner)
) -> dict[str, object]:
    """Return the owner's saved foods, most used first."""
    container: AppContainer = request.app.state.container
    return {"templates": container.template_cache.list(owner_id)}


@router.post("/templates", status_code=status.HTTP_201_CREATED)
async def create_template(
    payload: CreateTemplateRequest,
    request: Request,
    owner_id: UUID = Depends(current_owner),
) -> dict[str, object]:
    """Save a food to "My Foods"."""
    container: AppContainer = request.app.state.container
    template = container.template_cache.save(
        owner_id,
        payload.name,
        payload.calories,
        payload.protein,
        payload.carbs,
        payload.fat,
    )
    return {"template": template}


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: UUID, request: Request, owner_id: UUID = Depends(current_owner)
) -> Response:
    """Delete a saved food; unknown ids succeed too."""
    container: AppContainer = request.app.state.container
    template = container.template_cache.get(owner_id, template_id)
    if template is not None:
        container.template_cache.delete(template.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/templates/{template_id}/use")
async def use_template(
    template_id: UUID, request: Request, owner_id: UUID = Depends(current_owner)
) -> dict[str, object]:
    """Count a template selection and return the prefilled entry values."""
    container: AppContainer = request.app.state.container
    prefill = container.entry_composer.prefill_from_template(owner_id, template_id)
    if prefill is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {
        "prefill": prefill,
        "macro_check": check_macro_consistency(
            prefill.calories, prefill.protein, prefill.carbs, prefill.fat
        ),
    }


@router.get("/presets")
async def list_presets() -> dict[str, object]:
    """Return the built-in quick presets."""
    return {"presets": list(QUICK_PRESETS)}


@router.get("/entries/macro-check")
async def macro_check(
    calories: int, protein: float = 0.0, carbs: float = 0.0, fat: float = 0.0
) -> dict[str, object]:
    """Compare entered calories with the macro-derived estimate."""
    return {"macro_check": check_macro_consistency(calories, protein, carbs, fat)}


@router.post("/entries", status_code=status.HTTP_201_CREATED)
async def compose_entry(
    payload: ComposeEntryRequest,
    request: Request,
    owner_id: UUID = Depends(current_owner),
) -> dict[str, object]:
    """Compose and persist an entry from a manual, search or template source."""
    container: AppContainer = request.app.state.container
    source = payload.source
    if isinstance(source, TemplateSourcePayload):
        template = container.template_cache.get(owner_id, source.template_id)
        if template is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        domain_source: CompositionSource = template
    else:
        domain_source = source.to_domain()

    result = container.entry_composer.compose(
        owner_id,
        domain_source,
        save_as_template=payload.save_as_template,
        day=payload.day,
    )
    if not result.persisted:
        raise HTTPException(
            status_code=422,
            detail=result.rejection_reason,
        )
    return {
        "entry": result.entry,
        "template_status": result.template_status,
        "template": result.template,
        "macro_check": result.macro_check,
    }
