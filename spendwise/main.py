from fastapi import FastAPI
from contextlib import asynccontextmanager
from datetime import datetime
import logging

from spendwise.core.config import settings
from spendwise.db.store import ExpenseStore
from spendwise.routers import expenses, health, insights, reports
from spendwise.utils.insights import InsightClient, InsightConversation
from spendwise.utils.sample_data import generate_sample_expenses

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one record store and one conversation per app
    store = ExpenseStore(amount_policy=settings.AMOUNT_POLICY)
    if settings.SEED_SAMPLE_DATA:
        store.seed(generate_sample_expenses(datetime.now()))
        logger.info(f"Seeded store with {store.count()} sample expenses")
    app.state.store = store
    app.state.conversation = InsightConversation()
    app.state.insight_client = InsightClient(
        url=settings.INSIGHT_AGENT_URL,
        agent_id=settings.INSIGHT_AGENT_ID,
        timeout=settings.INSIGHT_TIMEOUT_SECONDS,
    )
    logger.info(f"{settings.PROJECT_NAME} started (amount policy: {store.amount_policy.value})")
    yield
    logger.info(f"{settings.PROJECT_NAME} stopped with {store.count()} expenses in memory")


app = FastAPI(
    title=settings.PROJECT_NAME,
    debug=settings.DEBUG,
    lifespan=lifespan
)


# Root endpoint
@app.get("/")
def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME} API"}


# Register routers
app.include_router(health.router, prefix=f"{settings.API_PREFIX}", tags=["Health"])  # /api/health
app.include_router(expenses.router, prefix=f"{settings.API_PREFIX}/expenses", tags=["Expenses"])
app.include_router(reports.router, prefix=f"{settings.API_PREFIX}/reports", tags=["Reports"])
app.include_router(insights.router, prefix=f"{settings.API_PREFIX}/insights", tags=["Insights"])
