# =============================================================================
# app/routers/resources.py - Team Resource Library Endpoints
# =============================================================================
# One router per resource kind, all built by the same factory:
#   GET/POST          /api/{kind}
#   GET/PATCH/DELETE  /api/{kind}/{resource_id}
# for kind in personnel, equipment, locations, props, costumes.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from app.dependencies import TeamDep
from core.models.resource import RESOURCE_KINDS, ResourceKind
from core.services.resource_service import ResourceService
from lib.casing import camel_keys


def create_resource_router(kind: ResourceKind) -> APIRouter:
    """
    Build the CRUD router for one resource kind.

    The request body models come from the kind's registry entry, so
    validation and OpenAPI docs are specific to each kind.
    """
    spec = RESOURCE_KINDS[kind]
    CreateModel = spec.create_model
    UpdateModel = spec.update_model
    ResourceId = Annotated[UUID, Path(description=f"{spec.label.capitalize()} UUID")]

    router = APIRouter()

    @router.get("", name=f"list_{kind.value}")
    async def list_resources(ctx: TeamDep):
        return camel_keys(ResourceService.list(kind, ctx.team_id))

    @router.post("", status_code=status.HTTP_201_CREATED, name=f"create_{kind.value}")
    async def create_resource(body: CreateModel, ctx: TeamDep):
        return camel_keys(ResourceService.create(kind, ctx.team_id, body))

    @router.get("/{resource_id}", name=f"get_{kind.value}")
    async def get_resource(resource_id: ResourceId, ctx: TeamDep):
        return camel_keys(ResourceService.get(kind, str(resource_id), ctx.team_id))

    @router.patch("/{resource_id}", name=f"update_{kind.value}")
    async def update_resource(resource_id: ResourceId, body: UpdateModel, ctx: TeamDep):
        return camel_keys(ResourceService.update(kind, str(resource_id), ctx.team_id, body))

    @router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT, name=f"delete_{kind.value}")
    async def delete_resource(resource_id: ResourceId, ctx: TeamDep):
        ResourceService.delete(kind, str(resource_id), ctx.team_id)

    return router


routers: dict[ResourceKind, APIRouter] = {
    kind: create_resource_router(kind) for kind in ResourceKind
}
