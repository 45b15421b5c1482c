from rapidllm.cli import entrypoint

entrypoint()
