"""Analysis API — circularity, dependencies, alias order, components."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from alias_graph.analysis.alias_dependency import TypeAliasDependency
from alias_graph.analysis.circularity import alias_components, alias_order, summarize
from alias_graph.errors import CyclicDependency, UnknownEntity
from alias_graph.web.state import state

router = APIRouter(prefix="/api/analysis")


class EnvIdRequest(BaseModel):
    env_id: str


class DepsRequest(BaseModel):
    env_id: str
    name: str


def _builder(env_id: str) -> TypeAliasDependency:
    session = state.get(env_id)
    if not session:
        raise HTTPException(404, "Environment not found")
    return session.builder


@router.post("/circular")
async def circular(req: EnvIdRequest):
    builder = _builder(req.env_id)
    summary = await asyncio.to_thread(summarize, builder)
    return {"env_id": req.env_id, **summary}


@router.post("/deps")
async def get_deps(req: DepsRequest):
    builder = _builder(req.env_id)

    def _run() -> dict:
        return {
            "name": req.name,
            "direct": sorted(map(str, builder.direct_dependencies_of(req.name))),
            "transitive": sorted(map(str, builder.dependencies_of(req.name))),
            "circular": builder.is_circular(req.name),
            "cycle": [str(member) for member in builder.cycle_of(req.name)],
        }

    try:
        return await asyncio.to_thread(_run)
    except UnknownEntity as e:
        raise HTTPException(404, str(e))
    except ValueError as e:
        raise HTTPException(422, str(e))


@router.post("/order")
async def get_order(req: EnvIdRequest):
    builder = _builder(req.env_id)
    try:
        names = await asyncio.to_thread(alias_order, builder)
    except CyclicDependency as e:
        raise HTTPException(409, {
            "message": str(e),
            "cycle": [str(member) for member in e.component],
        })
    return {"env_id": req.env_id, "order": [str(name) for name in names]}


@router.post("/components")
async def get_components(req: EnvIdRequest):
    builder = _builder(req.env_id)
    comps = await asyncio.to_thread(alias_components, builder)
    return {
        "env_id": req.env_id,
        "components": [[str(name) for name in component] for component in comps],
    }
