"""HTTP routers."""

from hostdetail.presentation.routers.host_detail import router as host_detail_router
from hostdetail.presentation.routers.system import system_router

__all__ = ["host_detail_router", "system_router"]
