"""SQL text used by the raw-SQL DAOs (qmark paramstyle)."""

# Shipping zones
INSERT_ZONE = "INSERT INTO shipping_zones (name, rate) VALUES (?, ?)"
SELECT_ZONE_BY_ID = "SELECT id, name, rate FROM shipping_zones WHERE id = ?"
SELECT_ALL_ZONES = "SELECT id, name, rate FROM shipping_zones ORDER BY id"
UPDATE_ZONE = "UPDATE shipping_zones SET name = ?, rate = ? WHERE id = ?"
DELETE_ZONE = "DELETE FROM shipping_zones WHERE id = ?"

# Customers
_CUSTOMER_COLUMNS = "id, name, email, phone, zone_id"

INSERT_CUSTOMER = "INSERT INTO customers (name, email, phone, zone_id) VALUES (?, ?, ?, ?)"
SELECT_CUSTOMER_BY_ID = f"SELECT {_CUSTOMER_COLUMNS} FROM customers WHERE id = ?"
SELECT_ALL_CUSTOMERS = f"SELECT {_CUSTOMER_COLUMNS} FROM customers ORDER BY id"
SELECT_CUSTOMERS_BY_ZONE = f"SELECT {_CUSTOMER_COLUMNS} FROM customers WHERE zone_id = ? ORDER BY id"
UPDATE_CUSTOMER = "UPDATE customers SET name = ?, email = ?, phone = ?, zone_id = ? WHERE id = ?"
DELETE_CUSTOMER = "DELETE FROM customers WHERE id = ?"

# Orders
_ORDER_COLUMNS = "id, order_date, total, customer_id"

INSERT_ORDER = "INSERT INTO orders (order_date, total, customer_id) VALUES (?, ?, ?)"
SELECT_ORDER_BY_ID = f"SELECT {_ORDER_COLUMNS} FROM orders WHERE id = ?"
SELECT_ALL_ORDERS = f"SELECT {_ORDER_COLUMNS} FROM orders ORDER BY id"
SELECT_ORDERS_BY_CUSTOMER = f"SELECT {_ORDER_COLUMNS} FROM orders WHERE customer_id = ? ORDER BY id"
SELECT_ORDERS_BY_DATE = f"SELECT {_ORDER_COLUMNS} FROM orders WHERE order_date = ? ORDER BY id"
UPDATE_ORDER = "UPDATE orders SET order_date = ?, total = ?, customer_id = ? WHERE id = ?"
DELETE_ORDER = "DELETE FROM orders WHERE id = ?"

SUM_ORDER_TOTALS_BY_CUSTOMER = "SELECT COALESCE(SUM(total), 0.0) FROM orders WHERE customer_id = ?"
