import os
import asyncio
from fastapi import FastAPI, Request
from .routes import router
from .core import Database
from .error_handlers import register_error_handlers, log_unhandled_loop_error
import logging
from pythonjsonlogger.json import JsonFormatter

# setup structured logging
logger = logging.getLogger('qaforum')
handler = logging.StreamHandler()
formatter = JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())

app = FastAPI(title="Q&A Forum API", version="1.0.0")
app.state.database = Database()

app.include_router(router, prefix="/api")
register_error_handlers(app)

@app.middleware('http')
async def log_requests(request: Request, call_next):
    logger.info({'msg':'request_start','method':request.method,'path':request.url.path})
    response = await call_next(request)
    logger.info({'msg':'request_end','status': response.status_code})
    return response

@app.on_event("startup")
async def startup():
    asyncio.get_running_loop().set_exception_handler(log_unhandled_loop_error)
    # Best-effort connect, requests retry on their own if this fails
    if await app.state.database.acquire() is None:
        logger.warning({'msg': 'db_start_failed'})

@app.on_event("shutdown")
async def shutdown():
    await app.state.database.dispose()
