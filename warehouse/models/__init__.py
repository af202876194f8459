# Users and audit
from warehouse.models.users.user_models import User
from warehouse.models.support.activity_models import UserActivity

# Catalog
from warehouse.models.catalog.category_models import Category
from warehouse.models.catalog.item_models import Item
from warehouse.models.catalog.location_models import Location

# Ledger
from warehouse.models.inventory.balance_models import StockBalance
from warehouse.models.inventory.flow_models import ItemFlow
from warehouse.models.inventory.stock_in_models import StockInRecord
from warehouse.models.inventory.stock_out_models import StockOutRecord
from warehouse.models.inventory.borrow_models import BorrowRecord
