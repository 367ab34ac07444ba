"""Select options shared by the training pages."""

from __future__ import annotations

from ..container import Container
from ..web.helpers import load_list


def student_options(container: Container, *, blank: str = "선택") -> dict[str, str]:
    students = load_list(container.student_service.list, status="active")
    return {"": blank, **{str(s.get("id")): s.get("name", "") for s in students}}


def record_type_options(container: Container, *, blank: str = "선택") -> dict[str, str]:
    types = load_list(container.training_catalog_service.record_types, active_only=True)
    return {"": blank, **{str(t.record_type_id): f"{t.name} ({t.unit})" if t.unit else t.name for t in types}}


def exercise_options(container: Container) -> dict[str, str]:
    return {str(e.get("id")): e.get("name", "") for e in load_list(container.training_catalog_service.exercises)}


def tag_options(container: Container) -> dict[str, str]:
    return {str(t.get("id")): t.get("name", "") for t in load_list(container.training_catalog_service.tags)}


def instructor_options(container: Container, *, blank: str = "선택") -> dict[str, str]:
    return {"": blank, **{str(i.get("id")): i.get("name", "") for i in load_list(container.instructor_service.list)}}


def selected_ids(item, key: str) -> list[str]:
    """Ids of a nested list (``[{id: ..}]`` or ``[1, 2]``) as strings, for checkbox values."""
    out = []
    for v in (item or {}).get(key) or ():
        out.append(str(v.get("id") if isinstance(v, dict) else v))
    return out
