"""Use-case functions called by the routers."""
