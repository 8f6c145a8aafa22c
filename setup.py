import setuptools

with open("README.md", "r", encoding="utf-8") as f:
  long_description = f.read()

setuptools.setup(
  name="lazystride",
  version="0.0.1",
  description="Lazy broadcast expressions over strided arrays with alias-aware in-place assignment",
  long_description=long_description,
  long_description_content_type="text/markdown",
  packages=setuptools.find_packages(include=["lazystride", "lazystride.*"]),
  classifiers=[
      "Programming Language :: Python :: 3",
      "License :: OSI Approved :: MIT License",
  ],
  install_requires=["numpy", "networkx"],
  python_requires=">=3.8",
  extras_require={
    "graph": ["pydot"],
    "linting": ["flake8", "pylint", "mypy", "pre-commit"],
    "testing": ["pytest", "pydot"],
  }
)
