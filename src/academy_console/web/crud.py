"""Standard list / new / detail / update / delete routes for one resource.

Endpoints follow one naming scheme so templates and other controllers can
link to them: ``<list_endpoint>`` for the list and ``<name>_new``,
``<name>_detail``, ``<name>_update``, ``<name>_delete`` with a
``<name>_id`` URL argument.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from flask import Flask, flash, redirect, render_template, request, url_for

from ..core.exceptions import ApiError, ValidationError
from .guards import Guards
from .helpers import flash_failure, form_data, load_item, load_list
from .views import Column, Field, FormBlock, Link, Table


@dataclass(frozen=True)
class CrudPage:
    name: str
    list_endpoint: str
    url: str
    permission: str
    title: str
    noun: str
    columns: Sequence[Column]
    # A sequence, or a callable when options are loaded per request.
    fields: Union[Sequence[Field], Callable[[], Sequence[Field]]]
    edit_fields: Union[Sequence[Field], Callable[[], Sequence[Field]], None] = None
    filters: Sequence[Field] = ()
    module: Optional[str] = None
    list_actions: Callable[[], Sequence[Link]] = field(default=lambda: ())


@dataclass(frozen=True)
class CrudHandlers:
    list_rows: Callable[[Mapping[str, str]], Sequence[Mapping]]
    get: Callable[[int], Any]
    create: Callable[[Mapping[str, str]], Optional[int]]
    update: Callable[[int, Mapping[str, str]], None]
    delete: Callable[[int], None]
    values: Callable[[Any], Mapping[str, Any]]
    item_title: Callable[[Any], str] = lambda item: ""
    detail_extras: Optional[Callable[[int, Any], Mapping[str, Any]]] = None


def _resolve(fields) -> Sequence[Field]:
    return fields() if callable(fields) else fields


def register_crud(app: Flask, guards: Guards, page: CrudPage, handlers: CrudHandlers) -> None:
    id_arg = f"{page.name}_id"
    detail_endpoint = f"{page.name}_detail"

    def detail_url(item_id) -> str:
        return url_for(detail_endpoint, **{id_arg: item_id})

    def list_view():
        filter_values = {f.name: request.args.get(f.name, "") for f in page.filters}
        rows = load_list(handlers.list_rows, filter_values)
        return render_template(
            "page.html",
            title=page.title,
            actions=[Link(f"{page.noun} 등록", url_for(f"{page.name}_new")), *page.list_actions()],
            filters=list(page.filters),
            filter_values=filter_values,
            tables=[Table(columns=page.columns, rows=rows, row_url=lambda r: detail_url(r.get("id")))],
        )

    def new_view():
        if request.method == "POST":
            try:
                item_id = handlers.create(form_data())
            except (ValidationError, ApiError) as e:
                flash_failure(e, f"{page.noun} 등록에 실패했습니다")
            else:
                flash(f"{page.noun}이(가) 등록되었습니다", "success")
                return redirect(detail_url(item_id) if item_id else url_for(page.list_endpoint))

        return render_template(
            "page.html",
            title=f"{page.noun} 등록",
            forms=[FormBlock(action=url_for(f"{page.name}_new"), fields=_resolve(page.fields), values=form_data())],
            back_url=url_for(page.list_endpoint),
        )

    def detail_view(**kwargs):
        item_id = kwargs[id_arg]
        item = load_item(handlers.get, item_id)
        if item is None:
            flash(f"{page.noun} 정보를 찾을 수 없습니다", "warning")
            return redirect(url_for(page.list_endpoint))

        context: dict[str, Any] = {
            "title": handlers.item_title(item) or page.noun,
            "actions": [Link("삭제", url_for(f"{page.name}_delete", **{id_arg: item_id}), method="post", confirm="삭제하시겠습니까?")],
            "forms": [
                FormBlock(
                    title="정보 수정",
                    action=url_for(f"{page.name}_update", **{id_arg: item_id}),
                    fields=_resolve(page.edit_fields or page.fields),
                    values=handlers.values(item),
                )
            ],
            "back_url": url_for(page.list_endpoint),
        }
        if handlers.detail_extras is not None:
            extras = dict(handlers.detail_extras(item_id, item))
            context["actions"] = [*extras.pop("actions", ()), *context["actions"]]
            context["forms"] = [*context["forms"], *extras.pop("forms", ())]
            context.update(extras)
        return render_template("page.html", **context)

    def update_view(**kwargs):
        item_id = kwargs[id_arg]
        try:
            handlers.update(item_id, form_data())
            flash("저장되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "저장에 실패했습니다")
        return redirect(detail_url(item_id))

    def delete_view(**kwargs):
        item_id = kwargs[id_arg]
        try:
            handlers.delete(item_id)
        except (ValidationError, ApiError) as e:
            flash_failure(e, "삭제에 실패했습니다")
            return redirect(detail_url(item_id))
        flash("삭제되었습니다", "success")
        return redirect(url_for(page.list_endpoint))

    def guard(action: str = "view"):
        if page.module:
            return guards.feature_required(page.module, page.permission, action)
        return guards.permission_required(page.permission, action)

    item_url = f"{page.url}/<int:{id_arg}>"
    app.add_url_rule(page.url, page.list_endpoint, guard()(list_view))
    app.add_url_rule(
        f"{page.url}/new",
        f"{page.name}_new",
        guard("create")(new_view),
        methods=["GET", "POST"],
    )
    app.add_url_rule(item_url, detail_endpoint, guard()(detail_view))
    app.add_url_rule(
        f"{item_url}/update",
        f"{page.name}_update",
        guard("edit")(update_view),
        methods=["POST"],
    )
    app.add_url_rule(
        f"{item_url}/delete",
        f"{page.name}_delete",
        guard("delete")(delete_view),
        methods=["POST"],
    )
