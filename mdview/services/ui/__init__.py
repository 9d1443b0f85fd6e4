"""Qt view layer: main window, ports and adapters."""
