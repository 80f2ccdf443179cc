# paintwall/main.py

from fastapi import FastAPI

from paintwall import __version__
from paintwall.api.accounts import router as accounts_router
from paintwall.api.assets import router as assets_router
from paintwall.api.calculators import router as calculators_router
from paintwall.api.clients import router as clients_router
from paintwall.api.companies import router as companies_router
from paintwall.api.dashboard import router as dashboard_router
from paintwall.api.documents import router as documents_router
from paintwall.api.invoices import router as invoices_router
from paintwall.api.leads import router as leads_router
from paintwall.api.projects import router as projects_router
from paintwall.api.properties import router as properties_router
from paintwall.api.rate_templates import router as rate_templates_router
from paintwall.api.receipts import router as receipts_router
from paintwall.api.rooms import router as rooms_router
from paintwall.api.transactions import router as transactions_router
from paintwall.api.vendors import router as vendors_router
from paintwall.core.errors import setup_exception_handlers
from paintwall.core.log import configure_logging

configure_logging()

app = FastAPI(
    title="Paint & Wall Office API",
    version=__version__,
)

setup_exception_handlers(app)


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(companies_router)
app.include_router(rate_templates_router)
app.include_router(clients_router)
app.include_router(leads_router)
app.include_router(properties_router)
app.include_router(rooms_router)
app.include_router(projects_router)
app.include_router(invoices_router)
app.include_router(receipts_router)
app.include_router(vendors_router)
app.include_router(accounts_router)
app.include_router(assets_router)
app.include_router(transactions_router)
app.include_router(documents_router)
app.include_router(dashboard_router)
app.include_router(calculators_router)
