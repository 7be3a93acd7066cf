"""
Display formatting for timestamps read back from the database.

The store keeps a +08:00 wall-clock value and the driver hands it back as if
it were UTC, eight hours ahead. Values are only corrected on the way out;
inserts always use the database's own ``now()``.
"""
from datetime import datetime, timedelta
from typing import Optional, Union

STORE_OFFSET = timedelta(hours=8)
DISPLAY_FORMAT = '%Y-%m-%d %H:%M:%S'


def normalize_timestamp(value: Optional[Union[datetime, str]]) -> str:
    if value is None or value == '':
        return ''
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    return (value - STORE_OFFSET).strftime(DISPLAY_FORMAT)
