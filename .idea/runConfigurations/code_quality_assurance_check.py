import os

print("Running isort...")
os.system("uv run isort rydsim_deriv tests")
print("---------------\n\n")

print("Running pytest...")
os.system("uv run pytest rydsim_deriv tests")
print("---------------\n\n")

print("Running mypy...")
os.system("uv run mypy rydsim_deriv tests")
print("---------------\n\n")

print("Running pylint...")
os.system("uv run pylint rydsim_deriv tests")
print("---------------\n\n")
