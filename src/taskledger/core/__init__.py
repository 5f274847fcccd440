"""taskledger core library: configuration, utilities and the task domain."""
