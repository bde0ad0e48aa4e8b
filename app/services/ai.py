# app/services/ai.py
"""
手相解读生成器

handler 只依赖 ReadingGenerator 接口：
- StubReadingGenerator：本地模板 + 随机词替换 + 随机置信度（默认）
- ExternalReadingGenerator：调用外部解读服务（settings.ai_api_url）
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from app.config import settings
from app.core.errors import ReadingGenerationError
from app.core.logging import get_logger

logger = get_logger("services.ai")

# 置信度：基准 0.75，上下浮动不超过 0.1，最终夹在 [0.6, 0.95]
BASE_CONFIDENCE = 0.75
CONFIDENCE_JITTER = 0.1
MIN_CONFIDENCE = 0.6
MAX_CONFIDENCE = 0.95


@dataclass
class PalmAnalysis:
    text_bengali: str
    text_hindi: str
    text_english: str
    confidence_score: float


class ReadingGenerator:
    """解读生成器接口"""

    def analyze_palm(self, image_data: str, language: str) -> PalmAnalysis:
        raise NotImplementedError


# ====== 模板 ======
# 每条掌纹一组形容词：english -> (bengali, hindi)
HEART_LINE: Dict[str, tuple] = {
    "strong": ("শক্তিশালী", "मजबूत"),
    "deep": ("গভীর", "गहरी"),
    "clear": ("স্পষ্ট", "स्पष्ट"),
    "prominent": ("উজ্জ্বল", "प्रमुख"),
    "well-defined": ("সুনির্দিষ্ট", "सुस्पष्ट"),
}
HEAD_LINE: Dict[str, tuple] = {
    "straight": ("সরল", "सीधी"),
    "curved": ("বাঁকানো", "घुमावदार"),
    "long": ("দীর্ঘ", "लंबी"),
    "balanced": ("সুষম", "संतुलित"),
    "focused": ("কেন্দ্রীভূত", "केंद्रित"),
}
LIFE_LINE: Dict[str, tuple] = {
    "vibrant": ("প্রাণবন্ত", "जीवंत"),
    "continuous": ("অবিচ্ছিন্ন", "निरंतर"),
    "deep": ("গভীর", "गहरी"),
    "sweeping": ("বিস্তৃত", "विस्तृत"),
    "unbroken": ("অখণ্ড", "अखंड"),
}
FATE_LINE: Dict[str, tuple] = {
    "distinct": ("স্বতন্ত্র", "विशिष्ट"),
    "clear": ("স্পষ্ট", "स्पष्ट"),
    "emerging": ("উদীয়মান", "उभरती हुई"),
    "developing": ("বিকাশমান", "विकसित होती"),
    "pronounced": ("প্রকট", "प्रकट"),
}

ENGLISH_TEMPLATE = (
    "Your palm reading reveals an extraordinary personality and a bright future ahead.\n\n"
    "Heart Line: Your {heart} heart line shows an emotionally rich and compassionate nature. "
    "Your love will be enduring and family bonds will play an important role in your journey.\n\n"
    "Head Line: Your {head} head line reveals sharp intelligence and a talent for solving "
    "complex problems. Creativity and curiosity will carry your career forward.\n\n"
    "Life Line: Your {life} life line promises vitality and good health. Your inner strength "
    "will help you overcome obstacles and keep your life stable.\n\n"
    "Fate Line: Your {fate} fate line indicates success in your career. Hard work and "
    "determination will lead you to leadership and recognition.\n\n"
    "Overall, your palm promises a happy, prosperous and fulfilling life."
)

BENGALI_TEMPLATE = (
    "আপনার হস্তরেখা একটি অসাধারণ ব্যক্তিত্ব এবং উজ্জ্বল ভবিষ্যতের ইঙ্গিত দেয়।\n\n"
    "হৃদয়রেখা: আপনার {heart} হৃদয়রেখা প্রমাণ করে যে আপনি আবেগপ্রবণ এবং দয়ালু। "
    "আপনার ভালোবাসা দীর্ঘস্থায়ী হবে এবং পারিবারিক বন্ধন গুরুত্বপূর্ণ ভূমিকা পালন করবে।\n\n"
    "মস্তিষ্করেখা: আপনার {head} মস্তিষ্করেখা আপনার বুদ্ধিমত্তা প্রকাশ করে। "
    "আপনি জটিল সমস্যা সমাধানে পারদর্শী এবং আপনার সৃজনশীলতা আপনাকে সাফল্যের পথে নিয়ে যাবে।\n\n"
    "জীবনরেখা: আপনার {life} জীবনরেখা দীর্ঘায়ু এবং সুস্বাস্থ্যের প্রতিশ্রুতি দেয়। "
    "আপনার অভ্যন্তরীণ শক্তি সকল বাধা অতিক্রম করতে সাহায্য করবে।\n\n"
    "ভাগ্যরেখা: আপনার {fate} ভাগ্যরেখা ক্যারিয়ারে সাফল্যের ইঙ্গিত দেয়। "
    "কঠোর পরিশ্রম আপনাকে উচ্চ পদে পৌঁছে দেবে।\n\n"
    "সামগ্রিকভাবে, আপনার হস্তরেখা একটি সুখী ও সমৃদ্ধ জীবনের প্রতিশ্রুতি দেয়।"
)

HINDI_TEMPLATE = (
    "आपकी हस्तरेखा एक असाधारण व्यक्तित्व और उज्ज्वल भविष्य का संकेत देती है।\n\n"
    "हृदय रेखा: आपकी {heart} हृदय रेखा दर्शाती है कि आप भावुक और दयालु व्यक्ति हैं। "
    "आपका प्यार टिकाऊ होगा और पारिवारिक बंधन महत्वपूर्ण भूमिका निभाएंगे।\n\n"
    "मस्तिष्क रेखा: आपकी {head} मस्तिष्क रेखा आपकी बुद्धिमत्ता को प्रकट करती है। "
    "आप जटिल समस्याओं को सुलझाने में कुशल हैं और आपकी रचनात्मकता आपको सफलता तक ले जाएगी।\n\n"
    "जीवन रेखा: आपकी {life} जीवन रेखा लंबी उम्र और अच्छे स्वास्थ्य का वादा करती है। "
    "आपकी आंतरिक शक्ति हर बाधा को पार करने में मदद करेगी।\n\n"
    "भाग्य रेखा: आपकी {fate} भाग्य रेखा करियर में सफलता का संकेत देती है। "
    "कड़ी मेहनत आपको ऊंचे पदों तक पहुंचाएगी।\n\n"
    "कुल मिलाकर, आपकी हस्तरेखा एक खुशहाल और समृद्ध जीवन का वादा करती है।"
)


def clamp_confidence(value: float) -> float:
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, value))


class StubReadingGenerator(ReadingGenerator):
    """
    本地模板生成：
    - 四条掌纹各随机取一个形容词，三种语言同时生成（与请求语言无关）
    - 置信度 = 0.75 ± 0.1 随机抖动，再夹到 [0.6, 0.95]
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def analyze_palm(self, image_data: str, language: str) -> PalmAnalysis:
        heart = self.rng.choice(list(HEART_LINE))
        head = self.rng.choice(list(HEAD_LINE))
        life = self.rng.choice(list(LIFE_LINE))
        fate = self.rng.choice(list(FATE_LINE))

        confidence = clamp_confidence(
            BASE_CONFIDENCE + self.rng.uniform(-CONFIDENCE_JITTER, CONFIDENCE_JITTER)
        )

        return PalmAnalysis(
            text_bengali=BENGALI_TEMPLATE.format(
                heart=HEART_LINE[heart][0], head=HEAD_LINE[head][0],
                life=LIFE_LINE[life][0], fate=FATE_LINE[fate][0],
            ),
            text_hindi=HINDI_TEMPLATE.format(
                heart=HEART_LINE[heart][1], head=HEAD_LINE[head][1],
                life=LIFE_LINE[life][1], fate=FATE_LINE[fate][1],
            ),
            text_english=ENGLISH_TEMPLATE.format(heart=heart, head=head, life=life, fate=fate),
            confidence_score=confidence,
        )


class ExternalReadingGenerator(ReadingGenerator):
    """
    外部解读服务：
    POST {api_url}  {"image_data": ..., "language": ...}
    期望返回 {"reading_text_bengali", "reading_text_hindi", "reading_text_english", "confidence_score"}
    失败时抛 ReadingGenerationError，不做兜底文案
    """

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        timeout: float = 20.0,
        client: Optional[httpx.Client] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self.client = client

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _post(self, payload: dict) -> dict:
        if self.client is not None:
            r = self.client.post(self.api_url, headers=self._headers(), json=payload)
            r.raise_for_status()
            return r.json()
        with httpx.Client(timeout=self.timeout) as client:
            r = client.post(self.api_url, headers=self._headers(), json=payload)
            r.raise_for_status()
            return r.json()

    def analyze_palm(self, image_data: str, language: str) -> PalmAnalysis:
        try:
            data = self._post({"image_data": image_data, "language": language})
        except (httpx.HTTPError, ValueError) as e:
            logger.error("palm_analysis_request_failed", url=self.api_url, error=str(e))
            raise ReadingGenerationError(f"Palm analysis service failed: {e}") from e

        try:
            analysis = PalmAnalysis(
                text_bengali=str(data["reading_text_bengali"]),
                text_hindi=str(data["reading_text_hindi"]),
                text_english=str(data["reading_text_english"]),
                confidence_score=float(data["confidence_score"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ReadingGenerationError(f"Malformed palm analysis response: {e}") from e

        if not 0.0 <= analysis.confidence_score <= 1.0:
            raise ReadingGenerationError(
                f"Confidence score out of range: {analysis.confidence_score}"
            )
        return analysis


def get_reading_generator() -> ReadingGenerator:
    """按配置选择生成器"""
    if settings.reading_generator == "external":
        if not settings.ai_api_url:
            raise ReadingGenerationError("READING_GENERATOR=external requires AI_API_URL")
        return ExternalReadingGenerator(
            settings.ai_api_url, settings.ai_api_key, timeout=settings.ai_timeout
        )
    return StubReadingGenerator()
