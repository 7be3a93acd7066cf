from datetime import datetime

from fastapi import APIRouter, Depends, FastAPI, Request

from ..core import Database, get_database
from ..timeutil import DISPLAY_FORMAT, normalize_timestamp

router = APIRouter()


def list_endpoints(app: FastAPI) -> list:
    """Every documented 'METHOD /path', read from the OpenAPI schema so included routers are covered."""
    return [
        f'{method.upper()} {path}'
        for path, operations in app.openapi()['paths'].items()
        for method in operations
    ]


@router.get('/test')
async def test(request: Request, db: Database = Depends(get_database)):
    now = datetime.now()
    return {
        'status': 'success',
        'message': 'server is running',
        'availableAPIs': list_endpoints(request.app),
        'database': 'connected' if db.available else 'not connected',
        # what a freshly stored value looks like before and after the display fix
        'serverTime': now.strftime(DISPLAY_FORMAT),
        'fixedTime': normalize_timestamp(now),
    }
