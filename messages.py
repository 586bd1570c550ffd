"""Fixed console strings shown to users of the helpers.

These are part of the observable behavior and stay in Japanese.
"""

# Console reader
CONSOLE_OPENED = "// コンソール入力にSystem.inをラップしました //"
CONSOLE_CLOSED = "// コンソール入力をclose処理しました。 //"
RAW_PROMPT = "-> "
NOT_A_NUMBER = "数字以外が入力されています。"
OUT_OF_RANGE = "入力された数値が範囲外です。"
QUIT_HINT = "で終了します。"
YES_NO_HINT = "[Y/n]"
READ_FAILURE = (
    "もしかしたら致命的なエラーが発生しているかもしれません...",
    "入出力系エラーなので物理的な問題も考えられます",
)

# File reader
READER_ENCODING_MISSING = "エンコード形式が存在していません!!"
READER_FILE_MISSING = "ファイルが存在していません!!"
READER_IO_FAILURE = "インアウトに問題が生じています!!"

# File writer
WRITER_ENCODING_MISSING = "指定したエンコードは見つかりません"
WRITER_FILE_MISSING = "指定したファイルは見つかりません"
WRITER_IO_FAILURE = "重大なエラーが発生しているかもしれません"

# SQL request (default exception hook)
SQL_FAILURE = "SQLの処理中にエラーが発生しました"


def quit_hint(quit_word: str) -> str:
    """Return the line telling the user how to stop a sentinel prompt."""
    return quit_word + QUIT_HINT
