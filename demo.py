import asyncio

from ask_llm import Client, Model, RichPrinter, Settings, oneshot


async def main():
    settings = Settings.from_env()
    printer = RichPrinter()

    # Simple oneshot (streamed, estimated cost)
    printer.print_response(await oneshot("Speak now", Model.FAST, settings=settings))

    # With options (single request, exact cost)
    response = await (
        Client(settings)
        .model(Model.FAST)
        .max_tokens(200)
        .stop_sequences([";"])
        .ask("How do you print hello world in python? Answer with a code block.")
    )
    printer.print_response(response)
    print(response.extract_codeblocks(["python", "py"]))

    # Structured output
    response = await (
        Client(settings)
        .model(Model.FAST)
        .max_tokens(100)
        .force_structured_output()
        .ask("What are the first 3 prime numbers? Return as JSON with a 'primes' array.")
    )
    print(response.text)


if __name__ == "__main__":
    asyncio.run(main())
