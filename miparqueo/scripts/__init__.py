# =============================================================================
# SCRIPTS MODULE INITIALIZATION
# =============================================================================
# File: scripts/__init__.py
# Description: Operational command-line tools
# =============================================================================
