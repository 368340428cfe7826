"""Example source file for gql-hookgen.

Run from this directory:

    gql-hookgen generate "*_gql.py" --schema-file schema.graphql

The operation below is completed in place ($id is added for user(id:))
and typed accessors are generated underneath it. Everything else in the
file, this docstring included, is regenerated.
"""

from gql import gql

query = gql("""
    query {
      user {
        id
        name
        followers { id name }
      }
    }
""")
