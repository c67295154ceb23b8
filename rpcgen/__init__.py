"""rpcgen - RSocket RPC service code generator."""

__version__ = "0.1.0"
