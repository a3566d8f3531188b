"""Environment routes — upload, inspect, and drop definitions snapshots."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from alias_graph.errors import AliasGraphError
from alias_graph.loader.schema import DefinitionsDocument
from alias_graph.web.state import state

router = APIRouter(prefix="/api")


class EnvironmentRequest(DefinitionsDocument):
    guarded_recursion: bool = False


class EnvironmentResponse(BaseModel):
    env_id: str
    aliases: int
    guarded_recursion: bool
    timestamp: str


def _describe(session) -> EnvironmentResponse:
    return EnvironmentResponse(
        env_id=session.id,
        aliases=len(session.env),
        guarded_recursion=session.builder.guarded_recursion,
        timestamp=session.timestamp,
    )


@router.post("/environments", response_model=EnvironmentResponse)
async def create_environment(req: EnvironmentRequest):
    try:
        env = req.to_environment()
    except AliasGraphError as e:
        raise HTTPException(422, str(e))
    session = state.add_environment(env, guarded_recursion=req.guarded_recursion)
    return _describe(session)


@router.get("/environments/{env_id}", response_model=EnvironmentResponse)
async def get_environment(env_id: str):
    session = state.get(env_id)
    if not session:
        raise HTTPException(404, "Environment not found")
    return _describe(session)


@router.get("/environments/{env_id}/aliases")
async def list_aliases(env_id: str):
    session = state.get(env_id)
    if not session:
        raise HTTPException(404, "Environment not found")
    return {"env_id": env_id, "aliases": [str(name) for name in session.env.alias_names()]}


@router.delete("/environments/{env_id}")
async def delete_environment(env_id: str):
    if not state.delete(env_id):
        raise HTTPException(404, "Environment not found")
    return {"deleted": env_id}
