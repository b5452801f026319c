"""CSV point dump of a horn mesh: ``ring,slice,x_mm,y_mm,z_mm,t``."""

import io
from typing import Optional

from .contract import is_failure
from .values import MeshData

CSV_HEADER = "ring,slice,x_mm,y_mm,z_mm,t"


def export_to_csv(mesh: Optional[MeshData]) -> str:
    if mesh is None or is_failure(mesh):
        return ""
    out = io.StringIO()
    out.write(CSV_HEADER + "\n")
    for ri, ring in enumerate(mesh.rings):
        for si, (px, py, pz) in enumerate(ring.points):
            out.write(f"{ri},{si},{px:.4f},{py:.4f},{pz:.4f},{ring.t:.4f}\n")
    return out.getvalue()
