"""Trade Prices – HTTP service (FastAPI app and routers)."""
