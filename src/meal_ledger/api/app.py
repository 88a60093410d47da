"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from meal_ledger.api.models import (
    DashboardOut,
    GoalOut,
    LogMealRequest,
    MealOut,
    ProgressOut,
    SetGoalRequest,
    dashboard_out,
    meal_out,
)
from meal_ledger.app_logging import configure_logging
from meal_ledger.containers import AppContainer
from meal_ledger.domain.errors import (
    AnalysisError,
    EmptyMealDescriptionError,
    LedgerError,
    LedgerErrorKind,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(
        request: Request, exc: AnalysisError
    ) -> JSONResponse:
        logger.warning("Meal analysis failed (%s): %s", exc.kind, exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "detail": (
                    "An error occurred while analyzing the meal. "
                    "Please try again or rephrase the description."
                ),
                "kind": exc.kind.value,
            },
        )

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        status_code = (
            status.HTTP_404_NOT_FOUND
            if exc.kind is LedgerErrorKind.INDEX_OUT_OF_RANGE
            else 422
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "kind": exc.kind.value},
        )

    @app.exception_handler(EmptyMealDescriptionError)
    async def empty_description_handler(
        request: Request, exc: EmptyMealDescriptionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "kind": "empty_description"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/meals")
    async def list_meals(request: Request) -> list[MealOut]:
        """Return logged meals in display order."""
        state_container: AppContainer = request.app.state.container
        return [
            meal_out(index, meal)
            for index, meal in enumerate(state_container.ledger.meals)
        ]

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def log_meal(body: LogMealRequest, request: Request) -> MealOut:
        """Analyze a meal description and add it to the log."""
        state_container: AppContainer = request.app.state.container
        meal = await state_container.meal_log_service.log_meal(body.description)
        return meal_out(len(state_container.ledger) - 1, meal)

    @app.delete("/meals/{index}")
    async def remove_meal(index: int, request: Request) -> DashboardOut:
        """Remove a logged meal by position."""
        state_container: AppContainer = request.app.state.container
        state_container.ledger.remove_meal(index)
        return dashboard_out(state_container.ledger.snapshot())

    @app.delete("/meals")
    async def clear_meals(request: Request) -> DashboardOut:
        """Clear the whole meal log."""
        state_container: AppContainer = request.app.state.container
        state_container.ledger.clear()
        return dashboard_out(state_container.ledger.snapshot())

    @app.put("/goal")
    async def set_goal(body: SetGoalRequest, request: Request) -> GoalOut:
        """Update the daily calorie goal."""
        state_container: AppContainer = request.app.state.container
        goal = state_container.ledger.set_goal(body.goal)
        progress = state_container.ledger.compute_progress()
        return GoalOut(
            calorie_goal=goal,
            progress=ProgressOut(
                percent=progress.percent, over_goal=progress.over_goal
            ),
        )

    @app.get("/dashboard")
    async def dashboard(request: Request) -> DashboardOut:
        """Return meals, totals and goal progress."""
        state_container: AppContainer = request.app.state.container
        return dashboard_out(state_container.ledger.snapshot())

    return app
