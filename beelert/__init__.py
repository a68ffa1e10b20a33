"""BeeLert: AI gateway for the BeeLert Discord community bot."""
