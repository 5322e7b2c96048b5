from setuptools import setup, find_packages

setup(
    name="quickmagres",
    version="0.1.0",
    description="Selection and tensor orientation tools for NMR crystallography (.magres) data",
    packages=find_packages(),
    py_modules=[
        "quickMagres", "click_handler", "config", "crystal_model",
        "elements_table", "errors", "euler_tracker", "message_service",
        "nmr_utils", "selection_manager", "tensor_math", "utils",
        "viewer_state",
    ],
    install_requires=[
        "numpy>=1.19.0",
        "python-xlib>=0.31",
        "matplotlib>=3.6",
    ],
    entry_points={
        "console_scripts": [
            "quickmagres=quickMagres:main",
        ],
    },
)
