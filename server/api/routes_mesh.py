"""
Mesh routes: ring grid + metrics, binary STL and CSV export.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from horn.contract import is_failure
from horn.csv_export import export_to_csv
from horn.mesh import build_horn, compute_mesh_metrics
from horn.shell import generate_shell_mesh
from horn.stl import count_triangles, encode_binary_stl
from horn.values import MeshData
from models import HornDesignRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _build_or_raise(request: HornDesignRequest) -> MeshData:
    """Run the engine for a request; engine failures become 422 responses."""
    try:
        result = build_horn(request.to_design())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Waveguide build failed: {exc}") from exc

    if is_failure(result):
        logger.info("[Mesh] Build refused (%s): %s", result.code, result.detail)
        raise HTTPException(status_code=422, detail=result.detail)
    return result


def _ring_payload(mesh: MeshData) -> List[Dict[str, Any]]:
    return [
        {
            "t": ring.t,
            "xH": ring.x_h,
            "yH": ring.y_h,
            "yV": ring.y_v,
            "n": ring.n,
            "points": ring.points.tolist(),
        }
        for ring in mesh.rings
    ]


@router.post("/api/mesh/build")
async def build_mesh_from_params(request: HornDesignRequest) -> Dict[str, Any]:
    """Build the ring grid and report its metrics (and points on request)."""
    mesh = _build_or_raise(request)
    shell_params = request.shell.to_params()
    shell = generate_shell_mesh(mesh, shell_params) if shell_params.enabled else None

    response: Dict[str, Any] = {
        "rings": len(mesh.rings),
        "pointsPerRing": mesh.slices + 1,
        "slices": mesh.slices,
        "metrics": compute_mesh_metrics(mesh),
        "triangleCount": count_triangles(mesh, shell),
    }
    if request.include_points:
        response["ringData"] = _ring_payload(mesh)
    return response


@router.post("/api/mesh/stl")
async def export_stl(request: HornDesignRequest) -> Response:
    """Binary STL of the inner surface, shelled when ``shell.enabled``."""
    mesh = _build_or_raise(request)
    shell_params = request.shell.to_params()
    try:
        shell = generate_shell_mesh(mesh, shell_params) if shell_params.enabled else None
        payload = encode_binary_stl(mesh, shell)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"STL export failed: {exc}") from exc

    return Response(
        content=payload,
        media_type="application/octet-stream",
        headers={"Content-Disposition": 'attachment; filename="horn-designer.stl"'},
    )


@router.post("/api/mesh/csv")
async def export_csv(request: HornDesignRequest) -> Response:
    mesh = _build_or_raise(request)
    return Response(
        content=export_to_csv(mesh),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="waveguide.csv"'},
    )
