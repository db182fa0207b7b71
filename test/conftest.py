pytest_plugins = [
    "fixtures.general",
    "fixtures.rpc",
    "fixtures.horizon",
    "fixtures.services",
]
