"""API route handlers."""

from .offers import router as offers_router
from .relationships import router as relationships_router
from .responses import router as responses_router
from .benchmarks import router as benchmarks_router
from .rubrics import router as rubrics_router
