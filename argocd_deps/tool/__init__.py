"""Command line tool for extracting dependencies from ArgoCD manifests."""
