import matplotlib

# Plots are saved, never shown, during tests
matplotlib.use("Agg")
