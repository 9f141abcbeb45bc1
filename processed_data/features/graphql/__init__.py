"""Federated GraphQL subgraph for ISPyB processed data."""
