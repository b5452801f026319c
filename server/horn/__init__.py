"""
R-OSSE horn geometry engine.

Guide curves -> superellipse cross-sections -> modulated ring grid ->
optional wall shell -> binary STL.
"""

from .blending import lerp, powered_smoothstep, smooth_lerp, smoothstep, smoothstep5
from .contract import GeometryFailure, is_failure
from .csv_export import export_to_csv
from .mesh import build_horn, build_mesh, compute_mesh_metrics
from .modulation import (
    combined_modulation,
    mod_raw_cardinal,
    mod_raw_diagonal,
    modulation_preview,
    prep_mod_params,
    x_modulation,
)
from .rosse import compute_rosse, lookup_x, lookup_y
from .shell import compute_vertex_normals, generate_shell_mesh
from .stl import count_triangles, encode_binary_stl, export_to_stl, parse_binary_stl
from .superellipse import compute_superellipse_n, cross_section_at, superellipse_points
from .values import (
    HornDesign,
    MeshData,
    MeshRing,
    ModulationBlendParams,
    ModulationParams,
    ProfileCurve,
    ProfileParams,
    ShapeBlendParams,
    ShellMeshData,
    ShellParams,
    XModParams,
)
