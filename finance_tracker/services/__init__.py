"""Services package: transaction store, transaction service and monthly aggregation."""
