"""Core type vocabulary shared by the schema and diff subsystems."""
