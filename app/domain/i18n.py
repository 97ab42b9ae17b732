import logging

from app.core.config import settings

logger = logging.getLogger("i18n")

SUPPORTED_LANGS = ["en", "ar"]
DEFAULT_LANG = "en"

MESSAGES = {
    # ── Language selection ──────────────────────────────────
    "LANG_PROMPT": {
        "en": (
            "Hello there! Welcome to {store}! We’re so excited to have you here.\n"
            "Whether you’re looking for your next signature scent or a gift for someone special, "
            "we’re here to help you every step of the way.\n"
            "Please choose your preferred language:\n\n"
            "مرحباً بك! أهلاً وسهلاً في متجر كونفتي لندن! نحن سعداء جداً بوجودك معنا.\n"
            "سواء كنت تبحث عن عطرك المميز الجديد أو هدية لشخص مميز، نحن هنا لمساعدتك في كل خطوة.\n"
            "يرجى اختيار اللغة التي تفضلها:"
        ),
    },
    "BTN_LANG_EN": {"en": "English"},
    "BTN_LANG_AR": {"en": "العربية"},
    "SELECT_LANGUAGE": {
        "en": "Please select a language.",
        "ar": "يرجى اختيار اللغة.",
    },
    "GREETING": {
        "en": "Hello there! Welcome to {store}!",
        "ar": "مرحباً بك في متجر كونفتي لندن!",
    },
    "GREETING_FOLLOWUP": {
        "en": "Let’s make this a delightful shopping experience together!",
        "ar": "دعنا نجعل تجربتك معنا ممتعة!",
    },
    "WELCOME_BACK": {
        "en": "Welcome back to {store}! It’s great to see you again. How can we assist you today?",
        "ar": "مرحباً بعودتك إلى متجر كونفتي لندن! يسعدنا رؤيتك مجدداً. كيف يمكننا مساعدتك اليوم؟",
    },

    # ── Main menu ───────────────────────────────────────────
    "MAIN_MENU": {
        "en": "Please choose one of the following options:",
        "ar": "يرجى اختيار إحدى الخيارات التالية:",
    },
    "BTN_ORDER": {"en": "Make a New Order", "ar": "إنشاء طلب جديد"},
    "BTN_STATUS": {"en": "Check Order Status", "ar": "التحقق من حالة الطلب"},
    "BTN_SUPPORT": {"en": "Support", "ar": "الدعم الفني"},
    "UNKNOWN_MAIN_MENU": {
        "en": "Unknown main menu option. Please pick one of the buttons or type 'menu'.",
        "ar": "خيار غير معروف. يرجى اختيار أحد الأزرار أو كتابة 'القائمة الرئيسية'.",
    },

    # ── Ordering ────────────────────────────────────────────
    "GENDER_PROMPT": {"en": "Men or Women products?", "ar": "منتجات رجالية أم نسائية؟"},
    "BTN_MEN": {"en": "Men", "ar": "رجالي"},
    "BTN_WOMEN": {"en": "Women", "ar": "نسائي"},
    "PICK_GENDER": {"en": "Please pick Men or Women.", "ar": "يرجى اختيار رجالي أو نسائي."},
    "GENDER_MEN": {"en": "men", "ar": "رجالية"},
    "GENDER_WOMEN": {"en": "women", "ar": "نسائية"},
    "CATEGORY_PROMPT": {
        "en": "Choose a category for {gender}:",
        "ar": "اختر تصنيفاً للمنتجات {gender}:",
    },
    "CATEGORY_PERFUMES": {"en": "Perfumes", "ar": "عطور"},
    "CATEGORY_DEODORANTS": {"en": "Deodorants", "ar": "مزيلات العرق"},
    "CATEGORY_BODY_SPRAYS": {"en": "Body sprays", "ar": "رشاشات الجسم"},
    "UNKNOWN_CATEGORY": {
        "en": "That category is not available. Please pick one of the categories below.",
        "ar": "هذا التصنيف غير متوفر. يرجى اختيار أحد التصنيفات أدناه.",
    },
    "NO_PRODUCTS": {
        "en": "Sorry, there are no products in this category right now. Please pick another category.",
        "ar": "عذراً، لا توجد منتجات في هذا التصنيف حالياً. يرجى اختيار تصنيف آخر.",
    },
    "PRODUCTS_PROMPT": {"en": "Choose a product:", "ar": "اختر منتجاً:"},
    "PRODUCTS_HEADER": {"en": "Our products", "ar": "منتجاتنا"},
    "PRODUCT_LINE": {"en": "• {name} ({price})", "ar": "• {name} ({price})"},
    "PRODUCT_NOT_FOUND": {
        "en": "Product not found. Please pick one of the products shown or type 'menu' to reset.",
        "ar": "المنتج غير موجود. يرجى اختيار أحد المنتجات المعروضة أو كتابة 'القائمة الرئيسية'.",
    },
    "ASK_QUANTITY": {
        "en": "How many of {name} would you like? (Type a number)",
        "ar": "كم قطعة من {name} تريد؟ (اكتب رقماً)",
    },
    "INVALID_QUANTITY": {
        "en": "Please enter a valid numeric quantity or type 'menu'.",
        "ar": "يرجى إدخال كمية رقمية صحيحة أو كتابة 'القائمة الرئيسية'.",
    },
    "ADDED_TO_CART": {"en": "Added {quantity} x {name}.", "ar": "تمت إضافة {quantity} × {name}."},
    "CART_HEADER": {"en": "Your cart:", "ar": "سلة التسوق:"},
    "CART_LINE": {
        "en": "{quantity} x {name} @ {price} = {subtotal}",
        "ar": "{quantity} × {name} @ {price} = {subtotal}",
    },
    "CART_TOTAL": {"en": "Total: {total}", "ar": "المجموع: {total}"},
    "CART_DECISION": {"en": "Continue shopping or checkout?", "ar": "متابعة التسوق أم إتمام الطلب؟"},
    "BTN_CONTINUE": {"en": "Continue", "ar": "متابعة التسوق"},
    "BTN_CHECKOUT": {"en": "Checkout", "ar": "إتمام الطلب"},
    "PICK_CONTINUE_OR_CHECKOUT": {
        "en": "Please pick Continue or Checkout.",
        "ar": "يرجى اختيار متابعة التسوق أو إتمام الطلب.",
    },

    # ── Checkout ────────────────────────────────────────────
    "ASK_NAME": {"en": "Please type your full name.", "ar": "يرجى كتابة اسمك الكامل."},
    "ASK_ADDRESS": {
        "en": "Thanks, {name}. Please type your delivery address now.",
        "ar": "شكراً {name}. يرجى كتابة عنوان التوصيل الآن.",
    },
    "ASK_LOCATION": {
        "en": "Please share your delivery location (a Google Maps link or a WhatsApp location pin).",
        "ar": "يرجى مشاركة موقع التوصيل (رابط خرائط جوجل أو موقع واتساب).",
    },
    "ASK_BILLING_SAME": {
        "en": "Is your billing address the same as your delivery address? (yes/no)",
        "ar": "هل عنوان الفاتورة هو نفس عنوان التوصيل؟ (نعم/لا)",
    },
    "INVALID_YES_NO": {"en": "Please answer 'yes' or 'no'.", "ar": "يرجى الإجابة بـ 'نعم' أو 'لا'."},
    "ASK_BILLING_ADDRESS": {"en": "Please type your billing address.", "ar": "يرجى كتابة عنوان الفاتورة."},
    "EMPTY_INPUT": {
        "en": "This field cannot be empty. Please type your answer or 'menu'.",
        "ar": "لا يمكن ترك هذا الحقل فارغاً. يرجى كتابة إجابتك أو 'القائمة الرئيسية'.",
    },
    "ORDER_SUMMARY_HEADER": {"en": "Your order:", "ar": "طلبك:"},
    "SUMMARY_NAME": {"en": "Name: {value}", "ar": "الاسم: {value}"},
    "SUMMARY_DELIVERY_ADDRESS": {"en": "Delivery address: {value}", "ar": "عنوان التوصيل: {value}"},
    "SUMMARY_DELIVERY_LOCATION": {"en": "Delivery location: {value}", "ar": "موقع التوصيل: {value}"},
    "SUMMARY_BILLING_ADDRESS": {"en": "Billing address: {value}", "ar": "عنوان الفاتورة: {value}"},
    "SUMMARY_PAYMENT": {"en": "Payment: cash on delivery", "ar": "الدفع: نقداً عند التسليم"},
    "CONFIRM_PROMPT": {"en": "Confirm or cancel?", "ar": "تأكيد أم إلغاء؟"},
    "BTN_CONFIRM": {"en": "Confirm", "ar": "تأكيد"},
    "BTN_CANCEL": {"en": "Cancel", "ar": "إلغاء"},
    "PICK_CONFIRM_OR_CANCEL": {"en": "Please confirm or cancel.", "ar": "يرجى التأكيد أو الإلغاء."},
    "ORDER_PLACED": {
        "en": "Thank you! Your order ({order_id}) is placed. Total: {total}. We will contact you soon.",
        "ar": "شكراً! تم إنشاء طلبك ({order_id}). المجموع: {total}. سنتواصل معك قريباً.",
    },
    "ORDER_FAILED": {
        "en": "Sorry, we could not place your order right now. Your cart is saved, please try confirming again.",
        "ar": "عذراً، تعذر إنشاء طلبك حالياً. سلة التسوق محفوظة، يرجى محاولة التأكيد مرة أخرى.",
    },
    "ORDER_CANCELLED": {
        "en": "Order canceled. Type 'menu' to start again.",
        "ar": "تم إلغاء الطلب. اكتب 'القائمة الرئيسية' للبدء من جديد.",
    },
    "INVOICE_CAPTION": {"en": "Invoice for order {order_id}", "ar": "فاتورة الطلب {order_id}"},

    # ── Order status ────────────────────────────────────────
    "NO_ORDERS": {
        "en": "No order found for your phone.",
        "ar": "لم يتم العثور على طلب لهذا الرقم.",
    },
    "ORDER_STATUS_HEADER": {"en": "Your orders:", "ar": "طلباتك:"},
    "ORDER_STATUS_LINE": {
        "en": "Order {order_id}: {status} ({total})",
        "ar": "الطلب {order_id}: {status} ({total})",
    },
    "STATUS_FAILED": {
        "en": "Sorry, we could not look up your orders right now. Please try again later.",
        "ar": "عذراً، تعذر البحث عن طلباتك حالياً. يرجى المحاولة لاحقاً.",
    },

    # ── Support ─────────────────────────────────────────────
    "SUPPORT_MENU": {
        "en": (
            "Welcome to the support section of {store}! How can we assist you today? "
            "Please choose one of the following options:"
        ),
        "ar": "مرحباً بك في قسم الدعم الخاص بـ متجر كونفتي لندن! كيف يمكننا مساعدتك اليوم؟ يرجى اختيار إحدى الخيارات التالية:",
    },
    "BTN_FAQS": {"en": "FAQs", "ar": "الأسئلة الشائعة"},
    "BTN_SUBMIT_TICKET": {"en": "Submit a Ticket", "ar": "إرسال تذكرة"},
    "BTN_LIVE_AGENT": {"en": "Live Agent", "ar": "التحدث مع ممثل"},
    "UNKNOWN_SUPPORT": {
        "en": "Unknown support option. Please pick one of the buttons or type 'menu'.",
        "ar": "خيار دعم غير معروف. يرجى اختيار أحد الأزرار أو كتابة 'القائمة الرئيسية'.",
    },
    "LIVE_AGENT": {
        "en": "A live agent will connect soon. (Placeholder)",
        "ar": "سيتم تحويلك إلى ممثل خدمة العملاء قريباً. (نموذج)",
    },
    "FAQ_HEADER": {"en": "Here are some frequently asked questions", "ar": "إليك بعض الأسئلة الشائعة"},
    "FAQ_BODY": {"en": "Please select a category below", "ar": "يرجى اختيار فئة"},
    "LIST_FOOTER": {"en": "Tap to view", "ar": "انقر للعرض"},
    "LIST_BUTTON": {"en": "View", "ar": "عرض"},
    "FAQ_GENERAL": {"en": "General Questions", "ar": "الأسئلة العامة"},
    "FAQ_PAYMENTS": {"en": "Payments", "ar": "الدفع"},
    "FAQ_SHIPPING": {"en": "Shipping & Delivery", "ar": "الشحن والتوصيل"},
    "FAQ_ORDERS": {"en": "Orders", "ar": "الطلبات"},
    "FAQ_PRODUCTS": {"en": "Products & Returns", "ar": "المنتجات والإرجاع"},
    "FAQ_UNKNOWN": {
        "en": "No info found for this category. Please pick one from the list.",
        "ar": "لا توجد معلومات لهذه الفئة. يرجى الاختيار من القائمة.",
    },
    "TICKET_ASK_NAME": {"en": "Please provide your full name.", "ar": "يرجى كتابة اسمك الكامل للمتابعة."},
    "TICKET_ASK_ORDERNUM": {
        "en": "Please enter your order number to proceed or type 'none' if you do not have an order.",
        "ar": "يرجى إدخال رقم الطلب الخاص بك للمتابعة أو كتابة 'لا يوجد' إذا لم يكن لديك طلب.",
    },
    "TICKET_TOPIC_HEADER": {"en": "Choose a topic", "ar": "اختر موضوعاً"},
    "TICKET_TOPIC_BODY": {"en": "Please select a topic below", "ar": "يرجى اختيار أحد المواضيع"},
    "TOPIC_ORDERS_PAYMENTS": {"en": "Orders and payments", "ar": "الطلبات والدفع"},
    "TOPIC_DELIVERY": {"en": "Delivery", "ar": "التوصيل"},
    "TOPIC_RETURNS": {"en": "Returns", "ar": "الإرجاع"},
    "TOPIC_OTHER": {"en": "Other", "ar": "أخرى"},
    "TICKET_PICK_TOPIC": {
        "en": "Please pick a topic from the list.",
        "ar": "يرجى اختيار موضوع من القائمة.",
    },
    "TICKET_ASK_DESC": {
        "en": "Please provide a brief description of your request.",
        "ar": "يرجى كتابة وصف موجز لطلبك للمتابعة.",
    },
    "TICKET_SUBMITTED": {
        "en": "Thank you! Your ticket ({ticket_number}) is submitted. We'll respond soon.",
        "ar": "شكرًا! تم إرسال التذكرة ({ticket_number}) بنجاح. سنرد قريبًا.",
    },
    "TICKET_FAILED": {
        "en": "Sorry, we could not submit your ticket right now. Please send your description again.",
        "ar": "عذراً، تعذر إرسال التذكرة حالياً. يرجى إرسال الوصف مرة أخرى.",
    },

    # ── Generic ─────────────────────────────────────────────
    "FALLBACK": {
        "en": "Please use the options provided. Type 'menu' if you got lost.",
        "ar": "يرجى استخدام الخيارات المتاحة. اكتب 'القائمة الرئيسية' إذا احتجت المساعدة.",
    },
}

FAQ_CONTENT = {
    "faq_general": {
        "en": (
            "General Questions:\n"
            "1. What types of perfumes do you sell?\n"
            "We offer a wide range of perfumes, deodorants, body sprays, and exclusive collections for men and women.\n\n"
            "2. Are your products authentic?\n"
            "Yes, all our products are 100% authentic and sourced directly from trusted suppliers.\n\n"
            "3. Do you offer tester perfumes?\n"
            "No, we do not provide testers for select fragrances.\n\n"
            "(If you need further assistance, type 'menu' and choose Support)"
        ),
        "ar": (
            "الأسئلة العامة:\n"
            "1. ما هي أنواع العطور التي تبيعونها؟\n"
            "نحن نقدم مجموعة واسعة من العطور، ومزيلات العرق، ورشاشات الجسم، والمجموعات الحصرية للرجال والنساء.\n\n"
            "2. هل منتجاتكم أصلية؟\n"
            "نعم، جميع منتجاتنا أصلية 100% ويتم الحصول عليها مباشرة من الموردين الموثوق بهم.\n\n"
            "3. هل توفرون عطوراً تجريبية؟\n"
            "لا، لا نوفر عينات تجريبية لبعض العطور."
        ),
    },
    "faq_payments": {
        "en": (
            "Payment Questions:\n"
            "1. What payment methods do you accept?\n"
            "We only accept cash on delivery (COD). You will pay the delivery agent when you receive your order.\n\n"
            "2. Can I pay online?\n"
            "At the moment, we only accept cash payments upon delivery. Online payment options are not available.\n\n"
            "3. Are there any additional charges for cash on delivery?\n"
            "No, there are no extra charges for using cash on delivery unless specified otherwise for your region."
        ),
        "ar": (
            "الدفع:\n"
            "1. ما هي طرق الدفع التي تقبلونها؟\n"
            "نحن نقبل الدفع النقدي عند التسليم فقط. ستقوم بالدفع لمندوب التوصيل عند استلام الطلب.\n\n"
            "2. هل يمكنني الدفع عبر الإنترنت؟\n"
            "في الوقت الحالي، نقبل الدفع النقدي فقط عند التسليم. خيارات الدفع عبر الإنترنت غير متوفرة.\n\n"
            "3. هل توجد رسوم إضافية للدفع النقدي عند التسليم؟\n"
            "لا، لا توجد رسوم إضافية على الدفع النقدي عند التسليم ما لم يتم تحديد خلاف ذلك لمنطقتك."
        ),
    },
    "faq_shipping": {
        "en": (
            "Shipping & Delivery Questions:\n"
            "1. Where do you deliver?\n"
            "We currently deliver within Libya. Check our delivery policy for more details.\n\n"
            "2. How long does delivery take?\n"
            "Delivery typically takes 3 days depending on your location. "
            "We will update you with tracking details once your order is shipped.\n\n"
            "3. Can I choose a specific delivery time?\n"
            "We’ll try our best to accommodate your preferred delivery time. Please mention it when placing your order.\n\n"
            "4. What happens if I’m not available to receive my order?\n"
            "If you’re unavailable, the delivery agent will contact you to reschedule the delivery."
        ),
        "ar": (
            "الشحن والتوصيل:\n"
            "1. أين يتم التوصيل؟\n"
            "نقوم حالياً بالتوصيل داخل ليبيا. تحقق من سياسة التوصيل لدينا للحصول على مزيد من التفاصيل.\n\n"
            "2. كم يستغرق التوصيل؟\n"
            "يستغرق التوصيل عادةً 3 أيام حسب موقعك. سنقوم بتحديثك بتفاصيل التتبع بمجرد شحن طلبك.\n\n"
            "3. هل يمكنني اختيار وقت توصيل محدد؟\n"
            "سنحاول قصارى جهدنا لتلبية وقت التوصيل المفضل لديك. يرجى ذكر ذلك عند تقديم الطلب.\n\n"
            "4. ماذا يحدث إذا لم أكن متوفراً لاستلام طلبي؟\n"
            "إذا لم تكن متوفراً، سيتواصل معك مندوب التوصيل لإعادة جدولة التسليم."
        ),
    },
    "faq_orders": {
        "en": (
            "Ordering Questions:\n"
            "1. How do I place an order?\n"
            "You can place an order through our WhatsApp Chatbot.\n\n"
            "2. Can I cancel or modify my order after placing it?\n"
            "Yes, you can cancel or modify your order before it is shipped. Contact us immediately if you need assistance.\n\n"
            "3. Is there a minimum order value?\n"
            "No, there is no minimum order value. You can purchase any item regardless of the price."
        ),
        "ar": (
            "الطلبات:\n"
            "1. كيف يمكنني تقديم طلب؟\n"
            "يمكنك تقديم طلبك من خلال روبوت الدردشة الخاص بنا على واتساب.\n\n"
            "2. هل يمكنني إلغاء أو تعديل طلبي بعد تقديمه؟\n"
            "نعم، يمكنك إلغاء أو تعديل طلبك قبل شحنه. تواصل معنا فوراً إذا كنت بحاجة إلى مساعدة.\n\n"
            "3. هل هناك حد أدنى لقيمة الطلب؟\n"
            "لا، لا يوجد حد أدنى لقيمة الطلب. يمكنك شراء أي منتج بغض النظر عن السعر."
        ),
    },
    "faq_products": {
        "en": (
            "Products & Returns:\n"
            "1. Do you offer returns or exchanges?\n"
            "Returns or exchanges are accepted for damaged or incorrect items only. "
            "Please contact us within 2 days of receiving your order.\n\n"
            "2. What should I do if I receive a damaged item?\n"
            "If your order arrives damaged, contact us immediately with photos of the item and packaging for a resolution.\n\n"
            "3. Can I request a gift wrap for my order?\n"
            "Yes, we offer gift-wrapping services for an additional fee. Let us know when you place your order."
        ),
        "ar": (
            "المنتجات والإرجاع:\n"
            "1. هل توفرون خدمات إرجاع أو استبدال؟\n"
            "نقبل الإرجاع أو الاستبدال فقط للمنتجات التالفة أو الخاطئة. يرجى التواصل معنا خلال يومين من استلام الطلب.\n\n"
            "2. ماذا أفعل إذا استلمت منتجاً تالفاً؟\n"
            "إذا وصل طلبك تالفاً، تواصل معنا فوراً مع صور للمنتج والتغليف لحل المشكلة.\n\n"
            "3. هل يمكنني طلب تغليف هدية لطلبي؟\n"
            "نعم، نوفر خدمات تغليف الهدايا مقابل رسوم إضافية. يرجى إبلاغنا عند تقديم الطلب."
        ),
    },
}

# FAQ category id -> list row label key
FAQ_LABEL_KEYS = {
    "faq_general": "FAQ_GENERAL",
    "faq_payments": "FAQ_PAYMENTS",
    "faq_shipping": "FAQ_SHIPPING",
    "faq_orders": "FAQ_ORDERS",
    "faq_products": "FAQ_PRODUCTS",
}


def _lang_code(lang) -> str:
    code = getattr(lang, "value", lang)
    return code if code in SUPPORTED_LANGS else DEFAULT_LANG


def t(key: str, lang=None, **kwargs) -> str:
    """Look up ``key`` in ``lang``; English for unknown languages or missing translations."""
    lang = _lang_code(lang)
    entry = MESSAGES.get(key)
    if entry is None:
        logger.warning("Missing i18n key %s", key)
        return key
    text = entry.get(lang) or entry[DEFAULT_LANG]
    kwargs.setdefault("store", settings.STORE_NAME)
    return text.format(**kwargs)


def faq_text(category_id: str, lang=None) -> str | None:
    entry = FAQ_CONTENT.get(category_id)
    if entry is None:
        return None
    return entry.get(_lang_code(lang)) or entry[DEFAULT_LANG]
