from modules.catalog.services.categories import CategoryService
from modules.catalog.services.inventory import InventoryService
from modules.catalog.services.products import ProductService
from modules.catalog.services.reports import InventoryReportService

__all__ = [
    "CategoryService",
    "InventoryReportService",
    "InventoryService",
    "ProductService",
]
