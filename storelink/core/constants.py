ORDER_STATUSES = ("PENDING", "PAID", "SHIPPED", "CANCELLED")

SHIP_BY_BUCKETS = ("DELAYED", "TODAY", "TOMORROW")
ROLLING_WINDOWS = {"30D": 30, "90D": 90, "180D": 180, "365D": 365}

DEFAULT_DASHBOARD_PATH = "/dashboard/summary"
