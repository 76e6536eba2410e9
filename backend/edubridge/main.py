import logging

from fastapi import FastAPI

from .db import Base, engine
from .settings import settings
from .routers import health
from .routers import translate
from .routers import translations
from .translator import close_translator

app = FastAPI(title="EduBridge API")
app.include_router(health.router)
app.include_router(translate.router)
app.include_router(translations.router)

@app.get("/info")
def root():
	return {
		"status": "ok",
		"gemini_configured": bool(settings.gemini_api_key),
		"tiers": {
			"memory": True,
			"local": settings.local_cache_enabled,
			"remote": settings.remote_cache_enabled,
		},
	}

@app.on_event("startup")
async def startup_event():
	# uvicorn configures root handlers; only our level is set here
	logging.getLogger("edubridge").setLevel(settings.log_level.upper())
	# Remote translation dictionary tables
	if settings.remote_cache_enabled:
		Base.metadata.create_all(bind=engine)

@app.on_event("shutdown")
async def shutdown_event():
	await close_translator()
