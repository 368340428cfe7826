"""Generate typed GraphQL accessor hooks for Python modules."""

__package_name__ = "gql-hookgen"
__version__ = "0.1.0"
