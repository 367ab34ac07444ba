from __future__ import annotations

import logging

from flask import Flask, render_template

from ..container import Container
from ..core.exceptions import ApiError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    """Public record boards, shown on lobby screens without a login."""

    boards = container.scoreboard_service

    def not_found():
        return render_template("public/message.html", message="기록판을 찾을 수 없습니다"), 404

    @app.route("/board/<slug>", endpoint="scoreboard")
    def scoreboard(slug: str):
        try:
            board = boards.board(slug)
        except ApiError as e:
            logger.warning("scoreboard %s unavailable: %s", slug, e)
            board = None
        if board is None:
            return not_found()
        return render_template("public/scoreboard.html", board=board)

    @app.route("/board/<slug>/scores", endpoint="scoreboard_scores")
    def scoreboard_scores(slug: str):
        try:
            result = boards.scores(slug)
        except ApiError as e:
            logger.warning("scoreboard scores %s unavailable: %s", slug, e)
            result = None
        if result is None:
            return not_found()
        title, scores = result
        return render_template("public/scores.html", slug=slug, title=title, scores=scores)
