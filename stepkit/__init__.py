"""Small command-line tools (a greeter and a calculator) and a headless glTF geometry viewer."""

__version__ = "0.1.0"
__all__ = ["hello", "calculator", "camera", "gltf", "viewer"]