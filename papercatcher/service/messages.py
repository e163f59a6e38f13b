from typing import Optional

from ..config import Config

MESSAGES = {
    "en": {
        "no_active_keywords": "No active keywords",
        "papers_saved": "Saved {count} new papers",
        "papers_saved_with_errors": "Saved {count} new papers ({errors} errors)",
        "paper_not_found": "Paper not found",
        "translation_done": "Translation completed",
        "translation_failed": "Translation failed",
        "papers_translated": "Translated {count} papers",
    },
    "ja": {
        "no_active_keywords": "有効なキーワードがありません",
        "papers_saved": "{count}件の新しい論文を保存しました",
        "papers_saved_with_errors": "{count}件の新しい論文を保存しました（{errors}件のエラー）",
        "paper_not_found": "論文が見つかりません",
        "translation_done": "翻訳が完了しました",
        "translation_failed": "翻訳に失敗しました",
        "papers_translated": "{count}件の論文を翻訳しました",
    },
    "zh": {
        "no_active_keywords": "没有启用的关键词",
        "papers_saved": "已保存 {count} 篇新论文",
        "papers_saved_with_errors": "已保存 {count} 篇新论文（{errors} 个错误）",
        "paper_not_found": "未找到论文",
        "translation_done": "翻译完成",
        "translation_failed": "翻译失败",
        "papers_translated": "已翻译 {count} 篇论文",
    },
}


def message(key: str, language: Optional[str] = None, **kwargs) -> str:
    """Look up a user-facing message, falling back to English."""
    catalog = MESSAGES.get(language or Config.language, MESSAGES["en"])
    return catalog[key].format(**kwargs)
