"""bloomkit core: engine, configuration, errors, and types."""
