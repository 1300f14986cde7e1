"""Built-in prompt text for the shrub generation batch."""

DEFAULT_SYSTEM_PROMPT = "Answer in one sentence"

DEFAULT_QUESTION = r"""
create me a uxn varvara tal source that has the ascii art of a shrub embedded in it.
 it should print the shrub to the console when run.

 here is the example hello world tal file for reference:
    ( dev/console )
    |10 @Console [ &pad $8 &char ]

    ( init )

    |0100 ( -> )

        ;hello-world

        &loop
            ( send ) LDAk .Console/char DEO
            ( incr ) #0001 ADD2
            ( loop ) LDAk ,&loop JCN
        POP2

    BRK

    @hello-world "Hello 20 "World!
----
The program should start with a comment and end with BRK.
# TAL/UXN assembly syntax for strings.
## String Delimiters for uxntal strings
- a single " open starts a string. "Dave indicates the start of a string Dave.
- close: any byte <= 0x20 ( ASCII space)
String are not terminated by ", they start with " and end with the first byte <= 0x20.
To emit a double quote character, use two consecutive quotes followed by a space: "" (emits a single " byte).
Newlines are encoded as byte 0x0A.
Spaces should be encoded as 0x20.
## Examples:
 - "HELLO -> emits bytes for HELLO.
 - ""HELP" -> emits bytes for "HELP".
 - "" -> emits a single " byte.
 - "HELLO 20 "World!  -> emits bytes for HELLO, a space (0x20), and World!
No label or macro expansion occurs inside string literals.
There are no multi-line strings; each line must be separately quoted.
There is no \n escape sequence.  multiple spaces require multiple 0x20 bytes.

only respond with the source code, nothing else, no headers or markdown ticks.
you should modify the source code to include the ascii art of a shrub using uxntal strings
make sure that the strings you generate follow these rules.
"""
