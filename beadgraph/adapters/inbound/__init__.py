# Inbound Adapters (Driving)
# Command-line entry point
