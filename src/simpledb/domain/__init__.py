"""SimpleDB domain layer: values, tables, errors and the table codec."""
