"""Action validation + dispatch helpers.

Every session action flows through the same pipeline so engine calls only ever see
well-formed requests and rejected actions show up consistently in server logs.
"""
