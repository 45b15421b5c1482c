from rapidllm import CompletionClient, load_settings

client = CompletionClient.from_settings(load_settings())
print(client.complete("thudm/glm-4-32b:free", "How tall is Michael Jordan?", system="Be terse."))
