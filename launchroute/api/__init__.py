"""HTTP surface for route lookup and cache control."""
